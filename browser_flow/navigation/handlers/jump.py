"""Unconditional jump step implementation."""

import logging
from typing import TYPE_CHECKING

from browser_flow.exceptions import FlowDefinitionError
from browser_flow.navigation.context import NavigationContext, resolve
from browser_flow.navigation.views import NavigationStep, StepResult

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)


class JumpStepHandler:
	"""Redirects control flow.

	``jump`` uses ``jumpTo`` (0-based index or label). ``gotoStep`` uses the
	1-based ``step`` field.
	"""

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type in ('jump', 'gotoStep')

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		if step.jump_to is not None:
			target = resolve(step.jump_to, context)
		elif step.extra('step') is not None:
			target = int(resolve(step.extra('step'), context)) - 1
		else:
			raise FlowDefinitionError(f'{step.type} step requires jumpTo or step', step_type=step.type)

		if isinstance(target, str) and target.strip().lstrip('-').isdigit():
			target = int(target)
		logger.debug(f'↪️ Jumping to {target!r}')
		return StepResult(jump_to=target)
