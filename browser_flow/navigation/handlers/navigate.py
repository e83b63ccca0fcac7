"""Navigate step implementation."""

import logging
from typing import TYPE_CHECKING

from browser_flow.navigation.context import NavigationContext, resolve
from browser_flow.navigation.handlers.base import require
from browser_flow.navigation.views import NavigationStep, StepResult
from browser_flow.navigation.waits import handle_wait_for, step_timeout

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)


class NavigateStepHandler:
	"""Loads ``url`` in the page, then applies ``waitFor`` if given."""

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type in ('navigate', 'goto')

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		url = str(require(resolve(step.url or step.value, context), 'url', step))
		timeout = step_timeout(step, context)
		wait_until = step.extra('waitUntil', 'load')

		logger.info(f'🔗 Navigating to {url}')
		await page.goto(url, wait_until=wait_until, timeout=timeout)

		if step.wait_for is not None:
			await handle_wait_for(page, step.wait_for, context, timeout)
		return StepResult()
