"""Script step implementation."""

import logging
from typing import TYPE_CHECKING

from playwright.async_api import Error as PlaywrightError

from browser_flow.exceptions import ScriptExecutionError
from browser_flow.navigation.context import NavigationContext, resolve
from browser_flow.navigation.handlers.base import require, step_output
from browser_flow.navigation.views import NavigationStep, StepResult
from browser_flow.navigation.waits import handle_wait_for, step_timeout

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)


class ScriptStepHandler:
	"""Evaluates ``script`` in the page.

	A failing script is logged and skipped unless the step sets
	``failOnError`` or the handler was built with ``errors_fatal``. A named
	step stores the script's return value.
	"""

	def __init__(self, errors_fatal: bool = False):
		self.errors_fatal = errors_fatal

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type in ('executeScript', 'script')

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		script = str(require(resolve(step.script or step.value, context), 'script', step))
		fatal = self.errors_fatal if step.fail_on_error is None else step.fail_on_error

		logger.debug('📜 Evaluating page script')
		try:
			result = await page.evaluate(script)
		except PlaywrightError as e:
			if fatal:
				raise ScriptExecutionError(f'Script failed: {e.message}', step_type=step.type) from e
			logger.warning(f'⚠️ Script failed, continuing: {e.message}')
			return StepResult()

		if step.wait_for is not None:
			await handle_wait_for(page, step.wait_for, context, step_timeout(step, context))
		return step_output(step, result)
