"""Wait step implementation."""

import logging
from typing import TYPE_CHECKING

from browser_flow.navigation.context import NavigationContext, resolve
from browser_flow.navigation.views import NavigationStep, StepResult
from browser_flow.navigation.waits import (
	as_number,
	handle_wait_for,
	human_pause,
	pause,
	step_timeout,
	wait_for_load_state,
)

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)


class WaitStepHandler:
	"""Pauses or waits for a page condition.

	``value`` as a number pauses that many ms (randomised with ``humanLike``),
	``value`` or ``selector`` as a string waits for that element, otherwise
	``waitFor`` applies, and with nothing configured the page must reach
	network idle.
	"""

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type == 'wait'

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		timeout = step_timeout(step, context)
		value = resolve(step.value, context)

		ms = as_number(value)
		if ms is not None:
			logger.debug(f'⏳ Waiting {ms:.0f}ms')
			if step.extra('humanLike', False):
				await human_pause(page, ms)
			else:
				await pause(page, ms)
			return StepResult()

		target = value if isinstance(value, str) and value.strip() else resolve(step.selector, context)
		if target:
			await handle_wait_for(page, target, context, timeout)
		elif step.wait_for is not None:
			await handle_wait_for(page, step.wait_for, context, timeout)
		else:
			logger.debug('⏳ Waiting for network idle')
			await wait_for_load_state(page, 'networkidle', timeout)
		return StepResult()
