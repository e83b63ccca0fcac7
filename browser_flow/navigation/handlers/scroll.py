"""Scroll step implementation."""

import logging
import random
from typing import TYPE_CHECKING

from browser_flow.exceptions import FlowDefinitionError
from browser_flow.navigation.context import NavigationContext, resolve
from browser_flow.navigation.handlers.base import visible_locator
from browser_flow.navigation.views import NavigationStep, StepResult
from browser_flow.navigation.waits import as_number, handle_wait_for, human_pause, pause, step_timeout

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)

DEFAULT_SCROLL_DISTANCE = 100
DEFAULT_SETTLE_MS = 500

SCROLL_INTO_VIEW_JS = """(element, margin) => {
	element.scrollIntoView({ block: 'center', inline: 'center' });
	if (margin) window.scrollBy(0, -margin);
}"""

SCROLL_BY_JS = '([dx, dy]) => window.scrollBy(dx, dy)'

DIRECTIONS = {
	'down': (0, 1),
	'up': (0, -1),
	'right': (1, 0),
	'left': (-1, 0),
}


class ScrollStepHandler:
	"""Scrolls an element into view or the window by ``direction``/``distance``.

	With a ``selector`` the element is centred (less ``scrollMargin`` px),
	then ``distance`` is scrolled further if set. The page then settles for
	``duration`` ms (default 500).
	"""

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type == 'scroll'

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		timeout = step_timeout(step, context)
		human_like = bool(step.extra('humanLike', False))
		selector = resolve(step.selector, context)
		distance = as_number(resolve(step.extra('distance'), context))

		if selector:
			locator = await visible_locator(page, str(selector), timeout)
			margin = as_number(resolve(step.extra('scrollMargin'), context)) or 0
			logger.debug(f'📜 Scrolling {selector} into view')
			await locator.evaluate(SCROLL_INTO_VIEW_JS, margin)
			if distance:
				await page.evaluate(SCROLL_BY_JS, [0, distance])
		else:
			direction = resolve(step.extra('direction', 'down'), context)
			if direction not in DIRECTIONS:
				raise FlowDefinitionError(f'Unknown scroll direction {direction!r}', step_type=step.type)
			amount = DEFAULT_SCROLL_DISTANCE if distance is None else distance
			if human_like:
				amount = int(amount * random.uniform(0.8, 1.2))
			dx, dy = DIRECTIONS[direction]
			logger.debug(f'📜 Scrolling {direction} by {amount}px')
			await page.evaluate(SCROLL_BY_JS, [dx * amount, dy * amount])

		settle = as_number(resolve(step.duration, context))
		settle = DEFAULT_SETTLE_MS if settle is None else settle
		if human_like:
			await human_pause(page, settle)
		else:
			await pause(page, settle)

		if step.wait_for is not None:
			await handle_wait_for(page, step.wait_for, context, timeout)
		return StepResult()
