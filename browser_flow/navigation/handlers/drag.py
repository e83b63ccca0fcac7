"""Drag step implementation."""

import logging
from typing import TYPE_CHECKING

from browser_flow.navigation.context import NavigationContext
from browser_flow.navigation.handlers.base import resolve_selector
from browser_flow.navigation.handlers.mouse import MouseStepHandler
from browser_flow.navigation.views import NavigationStep, StepResult

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)


class DragStepHandler:
	"""Drags the ``selector`` element onto the ``target`` element.

	Delegates to the mouse handler with ``action: drag``.
	"""

	def __init__(self, mouse_handler: MouseStepHandler):
		self.mouse_handler = mouse_handler

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type == 'drag'

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		source = resolve_selector(step, context)
		target = resolve_selector(step, context, field='target')

		logger.info(f'🖱️ Dragging {source} onto {target}')
		drag_step = step.derive(
			type='mousemove',
			action='drag',
			mouseTarget={'selector': source},
			endPoint={'selector': target},
		)
		return await self.mouse_handler.execute(drag_step, context, page)
