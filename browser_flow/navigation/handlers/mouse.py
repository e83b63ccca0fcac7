"""Mouse step implementation."""

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from browser_flow.exceptions import ExternalActionError, FlowDefinitionError, UnresolvedSelectorError
from browser_flow.navigation.context import NavigationContext, resolve
from browser_flow.navigation.handlers.base import visible_locator
from browser_flow.navigation.views import NavigationStep, StepResult
from browser_flow.navigation.waits import as_number, handle_wait_for, pause, step_timeout

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)

DEFAULT_MOVE_DURATION_MS = 500
# Intermediate mousemove events per second of move duration
MOVE_STEPS_PER_SECOND = 50
DRAG_HOLD_MS = 100
DEFAULT_RANDOM_OFFSET_PX = 5


@dataclass
class Point:
	x: float
	y: float


def random_delay(delay: Any) -> float:
	"""A number is used as is; ``{min, max}`` picks uniformly in range."""
	if isinstance(delay, (int, float)) and not isinstance(delay, bool):
		return float(delay)
	if isinstance(delay, dict) and 'min' in delay and 'max' in delay:
		low, high = sorted((float(delay['min']), float(delay['max'])))
		return random.uniform(low, high)
	return 0.0


class MouseStepHandler:
	"""Moves the pointer to ``mouseTarget`` and performs ``action``.

	``mouseTarget`` is either ``{selector, offsetX?, offsetY?}`` (centre of the
	element plus offset) or ``{x, y}``. Actions: ``move`` (default), ``click``,
	``drag`` (to ``endPoint``) and ``wheel`` (by ``delta``).
	"""

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type == 'mousemove'

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		action = resolve(step.extra('action', 'move'), context)
		timeout = step_timeout(step, context)
		duration = as_number(resolve(step.duration, context))
		duration = DEFAULT_MOVE_DURATION_MS if duration is None else duration
		human_like = step.extra('humanLike', True) is not False

		target = step.extra('mouseTarget')
		if not isinstance(target, dict):
			raise FlowDefinitionError('mousemove step requires a mouseTarget object', step_type=step.type)

		point = await self.resolve_point(
			page,
			target,
			context,
			timeout,
			randomize_offset=step.extra('randomizeOffset'),
		)
		logger.info(f'🖱️ Mouse {action} at ({point.x:.0f}, {point.y:.0f})')
		await self.move_to(page, point, duration if human_like else 0)

		delay_before = random_delay(step.extra('delayBeforeAction'))
		if delay_before > 0:
			await pause(page, delay_before)

		if action == 'click':
			await page.mouse.click(point.x, point.y, button=step.extra('button', 'left'))
		elif action == 'drag':
			end = step.extra('endPoint')
			if not isinstance(end, dict):
				raise FlowDefinitionError('mousemove drag requires an endPoint object', step_type=step.type)
			end_point = await self.resolve_point(page, end, context, timeout)
			await page.mouse.down()
			await pause(page, DRAG_HOLD_MS)
			await self.move_to(page, end_point, duration if human_like else 0)
			await page.mouse.up()
		elif action == 'wheel':
			delta = step.extra('delta') or {}
			dx = as_number(resolve(delta.get('x', 0), context)) or 0
			dy = as_number(resolve(delta.get('y', 0), context)) or 0
			await page.mouse.wheel(dx, dy)
		elif action != 'move':
			raise FlowDefinitionError(f'Unknown mouse action {action!r}', step_type=step.type)

		delay_after = random_delay(step.extra('delayAfterAction'))
		if delay_after > 0:
			await pause(page, delay_after)

		if step.wait_for is not None:
			await handle_wait_for(page, step.wait_for, context, timeout)
		return StepResult()

	async def resolve_point(
		self,
		page: 'PlaywrightPage',
		target: dict,
		context: NavigationContext,
		timeout: int,
		randomize_offset: Any = None,
	) -> Point:
		"""Page coordinates for a ``{selector, offsetX, offsetY}`` or ``{x, y}`` target."""
		selector = resolve(target.get('selector'), context)
		if selector:
			locator = await visible_locator(page, str(selector), timeout)
			box = await locator.bounding_box()
			if box is None:
				raise ExternalActionError(f'No bounding box for {selector!r}')
			x = box['x'] + box['width'] / 2 + (as_number(resolve(target.get('offsetX', 0), context)) or 0)
			y = box['y'] + box['height'] / 2 + (as_number(resolve(target.get('offsetY', 0), context)) or 0)
			if randomize_offset:
				spread = DEFAULT_RANDOM_OFFSET_PX if randomize_offset is True else abs(float(randomize_offset))
				x = min(max(box['x'], x + random.uniform(-spread, spread)), box['x'] + box['width'])
				y = min(max(box['y'], y + random.uniform(-spread, spread)), box['y'] + box['height'])
			return Point(x, y)

		x = as_number(resolve(target.get('x'), context))
		y = as_number(resolve(target.get('y'), context))
		if x is None or y is None:
			raise UnresolvedSelectorError('Mouse target needs a selector or x/y coordinates', step_type='mousemove')
		return Point(x, y)

	async def move_to(self, page: 'PlaywrightPage', point: Point, duration_ms: Optional[float]) -> None:
		steps = max(1, int((duration_ms or 0) / 1000 * MOVE_STEPS_PER_SECOND))
		await page.mouse.move(point.x, point.y, steps=steps)
