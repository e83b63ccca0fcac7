"""Click step implementation."""

import logging
from typing import TYPE_CHECKING

from browser_flow.navigation.context import NavigationContext
from browser_flow.navigation.handlers.base import resolve_selector, visible_locator
from browser_flow.navigation.views import NavigationStep, StepResult
from browser_flow.navigation.waits import handle_wait_for, step_timeout

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)


class ClickStepHandler:
	def can_handle(self, step: NavigationStep) -> bool:
		return step.type == 'click'

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		"""Wait for the element, click it, then apply ``waitFor``.

		``triggerType: keyboard`` focuses the element and presses Space instead
		of dispatching a mouse click.
		"""
		selector = resolve_selector(step, context)
		timeout = step_timeout(step, context)
		locator = await visible_locator(page, selector, timeout)

		if step.extra('triggerType') == 'keyboard':
			logger.debug(f'⌨️ Activating {selector} with keyboard')
			await locator.focus(timeout=timeout)
			await locator.press('Space', timeout=timeout)
		else:
			logger.debug(f'🖱️ Clicking {selector}')
			await locator.click(timeout=timeout, click_count=int(step.extra('clickCount', 1)))

		if step.wait_for is not None:
			await handle_wait_for(page, step.wait_for, context, timeout)
		return StepResult()
