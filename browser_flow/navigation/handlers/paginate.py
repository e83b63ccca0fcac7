"""Paginate step implementation."""

import logging
from typing import TYPE_CHECKING, Any, Dict, List

from browser_flow.navigation.context import NavigationContext, resolve
from browser_flow.navigation.handlers.base import resolve_selector
from browser_flow.navigation.views import NavigationStep, StepResult
from browser_flow.navigation.waits import as_number, handle_wait_for, step_timeout, wait_for_load_state

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

	from browser_flow.navigation.registry import StepHandlerRegistry

logger = logging.getLogger(__name__)


class PaginateStepHandler:
	"""Runs ``extractSteps`` on each page, following the next-page ``selector``.

	Stops after ``maxPages`` pages (default 1) or when the next button is
	missing or disabled. A named step collects each page's outputs in order.
	"""

	def __init__(self, registry: 'StepHandlerRegistry'):
		self.registry = registry

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type == 'paginate'

	async def _next_enabled(self, page: 'PlaywrightPage', selector: str) -> bool:
		button = page.locator(selector)
		if await button.count() == 0:
			return False
		first = button.first
		if await first.get_attribute('disabled') is not None:
			return False
		classes = (await first.get_attribute('class') or '').split()
		return 'disabled' not in classes

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		selector = resolve_selector(step, context)
		max_pages = int(as_number(resolve(step.extra('maxPages', 1), context)) or 1)
		timeout = step_timeout(step, context)
		extract_steps = step.extra('extractSteps') or []

		pages: List[Dict[str, Any]] = []
		pages.append(await self.registry.run_steps(extract_steps, context, page))

		for page_number in range(2, max_pages + 1):
			if not await self._next_enabled(page, selector):
				logger.info(f'📄 No further pages after page {page_number - 1}')
				break

			logger.info(f'📄 Loading page {page_number}')
			await page.locator(selector).first.click(timeout=timeout)
			if step.wait_for is not None:
				await handle_wait_for(page, step.wait_for, context, timeout)
			else:
				await wait_for_load_state(page, 'networkidle', timeout)

			pages.append(await self.registry.run_steps(extract_steps, context, page))

		if step.name:
			return StepResult(outputs={step.name: pages})
		return StepResult()
