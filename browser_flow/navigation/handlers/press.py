"""Press step implementation."""

import logging
from typing import TYPE_CHECKING

from browser_flow.exceptions import FlowDefinitionError
from browser_flow.navigation.context import NavigationContext, resolve
from browser_flow.navigation.handlers.base import require, visible_locator
from browser_flow.navigation.views import NavigationStep, StepResult
from browser_flow.navigation.waits import as_number, handle_wait_for, step_timeout

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)


class PressStepHandler:
	"""Keyboard ``press`` (default), ``down`` or ``up`` of ``key``.

	``modifiers`` (e.g. ``["Control", "Shift"]``) are combined into the key
	chord for ``press``. A ``selector`` is focused first.
	"""

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type == 'press'

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		key = str(require(resolve(step.extra('key', step.value), context), 'key', step))
		action = step.extra('action', 'press')
		modifiers = [str(resolve(m, context)) for m in step.extra('modifiers') or []]
		timeout = step_timeout(step, context)

		selector = resolve(step.selector, context)
		if selector:
			locator = await visible_locator(page, str(selector), timeout)
			await locator.focus(timeout=timeout)

		logger.debug(f'⌨️ Key {action} {"+".join([*modifiers, key])}')
		if action == 'down':
			await page.keyboard.down(key)
		elif action == 'up':
			await page.keyboard.up(key)
		elif action == 'press':
			delay = as_number(resolve(step.extra('delay'), context))
			await page.keyboard.press('+'.join([*modifiers, key]), delay=delay or 0)
		else:
			raise FlowDefinitionError(f'Unknown key action {action!r}', step_type=step.type)

		if step.wait_for is not None:
			await handle_wait_for(page, step.wait_for, context, timeout)
		return StepResult()
