"""Ordered step handler registry and dispatch."""

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from pydantic import ValidationError

from browser_flow.exceptions import (
	ExternalActionError,
	FlowDefinitionError,
	NavigationError,
	NavigationTimeoutError,
	NoHandlerForStepError,
)
from browser_flow.extraction import ExtractionEngine
from browser_flow.navigation.context import NavigationContext
from browser_flow.navigation.handlers import (
	AssertStepHandler,
	ClickStepHandler,
	ConditionStepHandler,
	DragStepHandler,
	ExtractStepHandler,
	HoverStepHandler,
	InputStepHandler,
	JumpStepHandler,
	MergeContextStepHandler,
	MouseStepHandler,
	NavigateStepHandler,
	PaginateStepHandler,
	PressStepHandler,
	ScriptStepHandler,
	ScrollStepHandler,
	SelectStepHandler,
	StepHandler,
	WaitStepHandler,
)
from browser_flow.navigation.views import NavigationStep, StepResult

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)


def to_step(raw: Union[NavigationStep, Dict[str, Any]]) -> NavigationStep:
	if isinstance(raw, NavigationStep):
		return raw
	try:
		return NavigationStep.model_validate(raw)
	except ValidationError as e:
		raise FlowDefinitionError(f'Invalid step {raw!r}: {e}') from e


class StepHandlerRegistry:
	"""Handlers scanned in registration order; the first that accepts a step wins."""

	def __init__(self, handlers: Optional[List[StepHandler]] = None):
		self.handlers: List[StepHandler] = list(handlers or [])

	def register(self, handler: StepHandler) -> StepHandler:
		self.handlers.append(handler)
		return handler

	def get_handler(self, step: NavigationStep) -> StepHandler:
		for handler in self.handlers:
			if handler.can_handle(step):
				return handler
		raise NoHandlerForStepError(f'No handler registered for step type {step.type!r}', step_type=step.type)

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		"""Dispatch ``step`` and translate page-surface errors into the navigation taxonomy."""
		handler = self.get_handler(step)
		try:
			result = await handler.execute(step, context, page)
		except NavigationError as e:
			if e.step_type is None:
				e.step_type = step.type
			raise
		except PlaywrightTimeoutError as e:
			raise NavigationTimeoutError(f'{step.describe()}: {e.message}', step_type=step.type) from e
		except PlaywrightError as e:
			raise ExternalActionError(f'{step.describe()}: {e.message}', step_type=step.type) from e
		except asyncio.TimeoutError as e:
			raise NavigationTimeoutError(f'{step.describe()}: timed out', step_type=step.type) from e
		except ValueError as e:
			raise FlowDefinitionError(f'{step.describe()}: {e}', step_type=step.type) from e
		return result if result is not None else StepResult()

	async def run_steps(
		self,
		steps: List[Union[NavigationStep, Dict[str, Any]]],
		context: NavigationContext,
		page: 'PlaywrightPage',
	) -> Dict[str, Any]:
		"""Run nested steps (condition branches, pagination) in order.

		Outputs are merged into ``context`` as each step finishes, and all of
		them are returned. Jump directives have no meaning inside a nested
		sequence and are ignored.

		Returns:
			Combined outputs of the nested steps
		"""
		outputs: Dict[str, Any] = {}
		for raw in steps:
			step = to_step(raw)
			try:
				result = await self.execute(step, context, page)
			except NavigationError as e:
				if not step.optional:
					raise
				logger.warning(f'⚠️ Optional nested step {step.describe()} failed: {e}')
				continue
			if result.jump_to is not None:
				logger.warning(f'⚠️ Ignoring jump to {result.jump_to!r} inside nested steps')
			context.update(result.outputs)
			outputs.update(result.outputs)
		return outputs


def create_default_registry(
	script_errors_fatal: bool = False,
	extraction_engine: Optional[ExtractionEngine] = None,
) -> StepHandlerRegistry:
	"""Registry with every built-in handler.

	Args:
		script_errors_fatal: Whether failing page scripts fail the flow
		extraction_engine: Engine used by extract steps

	Returns:
		A populated registry
	"""
	registry = StepHandlerRegistry()
	mouse = MouseStepHandler()
	registry.register(NavigateStepHandler())
	registry.register(JumpStepHandler())
	registry.register(ClickStepHandler())
	registry.register(InputStepHandler())
	registry.register(SelectStepHandler())
	registry.register(WaitStepHandler())
	registry.register(ExtractStepHandler(extraction_engine))
	registry.register(ConditionStepHandler(registry))
	registry.register(ScrollStepHandler())
	registry.register(mouse)
	registry.register(HoverStepHandler(mouse))
	registry.register(DragStepHandler(mouse))
	registry.register(PressStepHandler())
	registry.register(ScriptStepHandler(errors_fatal=script_errors_fatal))
	registry.register(AssertStepHandler())
	registry.register(PaginateStepHandler(registry))
	registry.register(MergeContextStepHandler())
	return registry
