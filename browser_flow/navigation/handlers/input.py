"""Input step implementation."""

import logging
from typing import TYPE_CHECKING

from browser_flow.navigation.context import NavigationContext, format_value, resolve
from browser_flow.navigation.handlers.base import resolve_selector, visible_locator
from browser_flow.navigation.views import NavigationStep, StepResult
from browser_flow.navigation.waits import handle_wait_for, step_timeout

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)

HUMAN_TYPING_DELAY_MS = 100


class InputStepHandler:
	"""Fills a field with the resolved ``value``.

	``clearInput`` (default true) empties the field first; ``humanInput`` types
	character by character instead of filling in one go.
	"""

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type in ('input', 'type')

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		selector = resolve_selector(step, context)
		text = format_value(resolve(step.value, context))
		timeout = step_timeout(step, context)
		locator = await visible_locator(page, selector, timeout)

		if step.extra('clearInput', True):
			await locator.fill('', timeout=timeout)

		if step.extra('humanInput', False):
			delay = step.extra('typingDelay', HUMAN_TYPING_DELAY_MS)
			logger.debug(f'⌨️ Typing {len(text)} chars into {selector}')
			await locator.press_sequentially(text, delay=delay, timeout=timeout)
		else:
			logger.debug(f'⌨️ Filling {selector}')
			await locator.fill(text, timeout=timeout)

		if step.wait_for is not None:
			await handle_wait_for(page, step.wait_for, context, timeout)
		return StepResult()
