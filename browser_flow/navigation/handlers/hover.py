"""Hover step implementation."""

import logging
from typing import TYPE_CHECKING

from browser_flow.navigation.context import NavigationContext, resolve
from browser_flow.navigation.handlers.base import resolve_selector, visible_locator
from browser_flow.navigation.handlers.mouse import MouseStepHandler
from browser_flow.navigation.views import NavigationStep, StepResult
from browser_flow.navigation.waits import as_number, handle_wait_for, pause, step_timeout

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)

DEFAULT_HOVER_DURATION_MS = 1000


class HoverStepHandler:
	"""Moves onto an element over half of ``duration`` and dwells for the other half.

	The move is delegated to the mouse handler through a synthetic
	``mousemove`` step.
	"""

	def __init__(self, mouse_handler: MouseStepHandler):
		self.mouse_handler = mouse_handler

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type == 'hover'

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		selector = resolve_selector(step, context)
		timeout = step_timeout(step, context)
		duration = as_number(resolve(step.duration, context))
		duration = DEFAULT_HOVER_DURATION_MS if duration is None else duration

		logger.info(f'🎯 Hovering over {selector}')
		await visible_locator(page, selector, timeout)

		move_step = step.derive(
			type='mousemove',
			action='move',
			mouseTarget={'selector': selector},
			duration=int(duration / 2),
			waitFor=None,
		)
		await self.mouse_handler.execute(move_step, context, page)
		await pause(page, duration / 2)

		if step.wait_for is not None:
			await handle_wait_for(page, step.wait_for, context, timeout)
		return StepResult()
