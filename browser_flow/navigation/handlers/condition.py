"""Condition step implementation."""

import inspect
import logging
import re
from typing import TYPE_CHECKING, Any, Optional

from playwright.async_api import Error as PlaywrightError

from browser_flow.exceptions import FlowDefinitionError
from browser_flow.navigation.context import NavigationContext, has_placeholders, resolve
from browser_flow.navigation.views import NavigationStep, StepResult

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

	from browser_flow.navigation.registry import StepHandlerRegistry

logger = logging.getLogger(__name__)

COMPARISON_PATTERN = re.compile(r'^(.*?)\s*(===|!==|==|!=|>=|<=|>|<)\s*(.*)$', re.DOTALL)
FALSY_STRINGS = {'', 'false', '0', 'null', 'none', 'undefined', 'nan'}


def is_truthy(value: Any) -> bool:
	if isinstance(value, str):
		return value.strip().lower() not in FALSY_STRINGS
	return bool(value)


def _unquote(operand: str) -> str:
	operand = operand.strip()
	if len(operand) >= 2 and operand[0] == operand[-1] and operand[0] in ('"', "'"):
		return operand[1:-1]
	return operand


def _as_float(operand: str) -> Optional[float]:
	try:
		return float(operand)
	except ValueError:
		return None


def evaluate_expression(expression: str) -> bool:
	"""Evaluate an already-interpolated comparison such as ``"3 > 0"``.

	Both operands numeric compares numbers; otherwise strings are compared.
	An empty operand makes ordering comparisons false. Without an operator the
	expression is judged by truthiness.
	"""
	match = COMPARISON_PATTERN.match(expression.strip())
	if match is None:
		return is_truthy(expression)

	left, operator, right = _unquote(match.group(1)), match.group(2), _unquote(match.group(3))
	if operator in ('==', '==='):
		left_num, right_num = _as_float(left), _as_float(right)
		if left_num is not None and right_num is not None:
			return left_num == right_num
		return left == right
	if operator in ('!=', '!=='):
		left_num, right_num = _as_float(left), _as_float(right)
		if left_num is not None and right_num is not None:
			return left_num != right_num
		return left != right

	if left == '' or right == '':
		return False
	left_num, right_num = _as_float(left), _as_float(right)
	a: Any = left_num if left_num is not None and right_num is not None else left
	b: Any = right_num if left_num is not None and right_num is not None else right
	if operator == '>':
		return a > b
	if operator == '<':
		return a < b
	if operator == '>=':
		return a >= b
	return a <= b


class ConditionStepHandler:
	"""Evaluates ``condition`` and branches.

	``conditionType`` is ``selector`` (an element exists), ``expression`` (a
	comparison over interpolated values) or ``script`` (page evaluation). It
	defaults to ``expression`` when the condition contains placeholders and
	``selector`` otherwise. A callable condition gets ``(context, page)``.

	When true, ``thenSteps`` run inline and ``jumpTo`` (if set) is emitted;
	when false, ``elseSteps`` run and execution falls through.
	"""

	def __init__(self, registry: 'StepHandlerRegistry'):
		self.registry = registry

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type == 'condition'

	async def evaluate(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> bool:
		condition = step.condition
		if condition is None or condition == '':
			raise FlowDefinitionError('condition step requires a condition', step_type=step.type)

		if callable(condition):
			try:
				result = condition(context, page)
				if inspect.isawaitable(result):
					result = await result
				return bool(result)
			except Exception as e:
				logger.warning(f'⚠️ Condition callable raised, treating as false: {e}')
				return False

		if not isinstance(condition, str):
			return is_truthy(condition)

		condition_type = step.extra('conditionType') or ('expression' if has_placeholders(condition) else 'selector')
		resolved = resolve(condition, context)

		if condition_type == 'expression':
			if not isinstance(resolved, str):
				return is_truthy(resolved)
			return evaluate_expression(resolved)

		if condition_type == 'script':
			try:
				return is_truthy(await page.evaluate(str(resolved)))
			except PlaywrightError as e:
				logger.warning(f'⚠️ Condition script failed, treating as false: {e.message}')
				return False

		if condition_type == 'selector':
			if not resolved:
				return False
			try:
				return await page.locator(str(resolved)).count() > 0
			except PlaywrightError as e:
				logger.warning(f'⚠️ Condition selector {resolved!r} failed, treating as false: {e.message}')
				return False

		raise FlowDefinitionError(f'Unknown conditionType {condition_type!r}', step_type=step.type)

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		result = await self.evaluate(step, context, page)
		logger.info(f'🔀 Condition {step.condition if not callable(step.condition) else "<callable>"} -> {result}')

		outputs = {step.name: result} if step.name else {}
		branch = step.extra('thenSteps') if result else step.extra('elseSteps')
		if branch:
			outputs.update(await self.registry.run_steps(branch, context, page))

		if result and step.jump_to is not None:
			return StepResult(outputs=outputs, jump_to=resolve(step.jump_to, context))
		return StepResult(outputs=outputs)
