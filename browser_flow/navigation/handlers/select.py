"""Select step implementation."""

import logging
from typing import TYPE_CHECKING

from browser_flow.navigation.context import NavigationContext, format_value, resolve
from browser_flow.navigation.handlers.base import require, resolve_selector, visible_locator
from browser_flow.navigation.views import NavigationStep, StepResult
from browser_flow.navigation.waits import handle_wait_for, step_timeout

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)


class SelectStepHandler:
	def can_handle(self, step: NavigationStep) -> bool:
		return step.type == 'select'

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		"""Select option(s) of a ``<select>`` by value; a list selects several."""
		selector = resolve_selector(step, context)
		raw = step.value
		if isinstance(raw, list):
			values = [format_value(resolve(v, context)) for v in raw]
		else:
			values = [format_value(require(resolve(raw, context), 'value', step))]
		timeout = step_timeout(step, context)
		locator = await visible_locator(page, selector, timeout)

		logger.debug(f'🔽 Selecting {values} in {selector}')
		await locator.select_option(values if len(values) > 1 else values[0], timeout=timeout)

		if step.wait_for is not None:
			await handle_wait_for(page, step.wait_for, context, timeout)
		return StepResult()
