"""Flow interpreter: walks the step list and assembles the flow result."""

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from browser_flow.exceptions import (
	ExternalActionError,
	FlowDefinitionError,
	NavigationError,
	NavigationTimeoutError,
	NoHandlerForStepError,
)
from browser_flow.navigation.context import NavigationContext
from browser_flow.navigation.registry import StepHandlerRegistry, create_default_registry, to_step
from browser_flow.navigation.views import (
	FlowResult,
	FlowStatus,
	JumpTarget,
	NavigationOptions,
	NavigationStep,
)

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)


@dataclass
class CompiledFlow:
	"""Validated steps plus label -> index table, built once per run."""

	steps: List[NavigationStep]
	labels: Dict[str, int] = field(default_factory=dict)

	def resolve_target(self, target: JumpTarget) -> int:
		"""Index for a jump target. Integers are 0-based step indices."""
		if isinstance(target, bool):
			raise FlowDefinitionError(f'Invalid jump target {target!r}')
		if isinstance(target, str) and target.strip().isdigit():
			target = int(target)
		if isinstance(target, int):
			if target < 0:
				raise FlowDefinitionError(f'Jump target index {target} is negative')
			return target
		if target in self.labels:
			return self.labels[target]
		raise FlowDefinitionError(f'Unknown jump label {target!r}')


def compile_flow(raw_steps: List[Union[NavigationStep, Dict[str, Any]]]) -> CompiledFlow:
	"""Validate steps and resolve labels.

	Raises:
		FlowDefinitionError: invalid step, duplicate label or jump to an unknown label
	"""
	steps = [to_step(raw) for raw in raw_steps]
	flow = CompiledFlow(steps=steps)
	for index, step in enumerate(steps):
		if not step.label:
			continue
		if step.label in flow.labels:
			raise FlowDefinitionError(f'Duplicate step label {step.label!r}')
		flow.labels[step.label] = index

	for step in steps:
		target = step.jump_to
		if isinstance(target, str) and '{{' not in target and not target.lstrip('-').isdigit():
			flow.resolve_target(target)
	return flow


def _screenshot_name(step_index: int, phase: str) -> str:
	return f'step_{step_index:03d}_{phase}_{int(time.time() * 1000)}.png'


class NavigationEngine:
	"""Runs declarative flows against one page.

	Example:
		engine = NavigationEngine(page)
		result = await engine.execute_flow('https://example.com', [
			{'type': 'extract', 'selector': 'h1', 'name': 'title'},
		])
	"""

	def __init__(
		self,
		page: 'PlaywrightPage',
		options: Optional[Union[NavigationOptions, Dict[str, Any]]] = None,
		registry: Optional[StepHandlerRegistry] = None,
	):
		self.page = page
		if isinstance(options, dict):
			options = NavigationOptions.model_validate(options)
		self.options = options or NavigationOptions()
		self.registry = registry or create_default_registry(script_errors_fatal=self.options.script_errors_fatal)
		self.logger = logger

	async def execute_flow(
		self,
		start_url: Optional[str],
		steps: List[Union[NavigationStep, Dict[str, Any]]],
		variables: Optional[Dict[str, Any]] = None,
	) -> FlowResult:
		"""Run ``steps`` after loading ``start_url``.

		Never raises for flow failures: errors are reported on the result,
		together with every output produced before the failure.

		Args:
			start_url: Page to open first; skipped when empty
			steps: Step dicts (JSON shape) or ``NavigationStep`` models
			variables: Initial context

		Returns:
			The flow result
		"""
		flow_id = f'nav_{int(time.time() * 1000)}'
		context: NavigationContext = dict(variables or {})
		screenshots: List[str] = []
		steps_executed = 0
		loop = asyncio.get_running_loop()
		deadline = loop.time() + self.options.max_time_ms / 1000 if self.options.max_time_ms else None

		def finish(status: FlowStatus, error: Optional[NavigationError] = None) -> FlowResult:
			if error is not None:
				self.logger.error(f'❌ Flow {flow_id} failed after {steps_executed} steps: [{error.code}] {error}')
			else:
				self.logger.info(f'✅ Flow {flow_id} completed after {steps_executed} steps')
			return FlowResult(
				id=flow_id,
				start_url=start_url,
				status=status,
				steps_executed=steps_executed,
				result=context,
				screenshots=screenshots,
				error=str(error) if error is not None else None,
				error_type=error.code if error is not None else None,
			)

		try:
			flow = compile_flow(steps)
		except FlowDefinitionError as e:
			return finish(FlowStatus.FAILED, e)

		self.logger.info(f'🚀 Starting flow {flow_id} with {len(flow.steps)} steps')
		try:
			if start_url:
				await self._goto_start_url(start_url)
		except NavigationError as e:
			return finish(FlowStatus.FAILED, e)

		index = 0
		while 0 <= index < len(flow.steps):
			if self.options.max_steps is not None and steps_executed >= self.options.max_steps:
				self.logger.warning(f'⚠️ Reached max steps ({self.options.max_steps}), stopping flow')
				break

			remaining = None
			if deadline is not None:
				remaining = deadline - loop.time()
				if remaining <= 0:
					return finish(
						FlowStatus.FAILED,
						NavigationTimeoutError(f'Flow exceeded {self.options.max_time_ms}ms before step {index}'),
					)

			step = flow.steps[index]
			self.logger.info(f'▶️ Step {index}: {step.describe()}')
			if self.options.screenshots:
				await self._screenshot(index, 'before', screenshots)

			try:
				if remaining is not None:
					result = await asyncio.wait_for(self.registry.execute(step, context, self.page), timeout=remaining)
				else:
					result = await self.registry.execute(step, context, self.page)
			except asyncio.TimeoutError:
				steps_executed += 1
				return finish(
					FlowStatus.FAILED,
					NavigationTimeoutError(f'Flow exceeded {self.options.max_time_ms}ms during step {index}', step_type=step.type),
				)
			except NavigationError as e:
				steps_executed += 1
				if step.optional and not isinstance(e, (FlowDefinitionError, NoHandlerForStepError)):
					self.logger.warning(f'⚠️ Optional step {index} ({step.type}) failed, continuing: {e}')
					index += 1
					continue
				return finish(FlowStatus.FAILED, e)
			except Exception as e:
				steps_executed += 1
				self.logger.exception(f'Unexpected error in step {index} ({step.type})')
				return finish(FlowStatus.FAILED, NavigationError(f'{step.describe()}: {type(e).__name__}: {e}', step_type=step.type))

			steps_executed += 1
			context.update(result.outputs)

			if self.options.screenshots:
				await self._screenshot(index, 'after', screenshots)

			if result.jump_to is None:
				index += 1
				continue
			try:
				index = flow.resolve_target(result.jump_to)
			except FlowDefinitionError as e:
				return finish(FlowStatus.FAILED, e)
			self.logger.debug(f'↪️ Jumping to step {index}')

		return finish(FlowStatus.COMPLETED)

	async def _goto_start_url(self, url: str) -> None:
		"""Open the start page, waiting for network idle and falling back to ``load``."""
		timeout = self.options.navigation_timeout_ms
		self.logger.info(f'🔗 Opening {url}')
		try:
			await self.page.goto(url, wait_until='networkidle', timeout=timeout)
			return
		except PlaywrightTimeoutError:
			self.logger.warning(f'⚠️ Network never went idle on {url}, retrying with load')
		except PlaywrightError as e:
			raise ExternalActionError(f'Navigation to {url} failed: {e.message}', step_type='navigate') from e

		try:
			await self.page.goto(url, wait_until='load', timeout=timeout)
		except PlaywrightTimeoutError as e:
			raise NavigationTimeoutError(f'Navigation to {url} timed out after {timeout}ms', step_type='navigate') from e
		except PlaywrightError as e:
			raise ExternalActionError(f'Navigation to {url} failed: {e.message}', step_type='navigate') from e

	async def _screenshot(self, step_index: int, phase: str, screenshots: List[str]) -> None:
		path = os.path.join(self.options.screenshots_path, _screenshot_name(step_index, phase))
		try:
			os.makedirs(self.options.screenshots_path, exist_ok=True)
			await self.page.screenshot(path=path, full_page=True)
		except (OSError, PlaywrightError) as e:
			self.logger.warning(f'⚠️ Screenshot {phase} step {step_index} failed: {e}')
			return
		screenshots.append(path)
