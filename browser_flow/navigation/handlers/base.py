"""Step handler contract and helpers shared by handlers."""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from browser_flow.exceptions import NavigationTimeoutError, UnresolvedSelectorError
from browser_flow.navigation.context import NavigationContext, resolve
from browser_flow.navigation.views import NavigationStep, StepResult

if TYPE_CHECKING:
	from playwright.async_api import Locator as PlaywrightLocator
	from playwright.async_api import Page as PlaywrightPage


@runtime_checkable
class StepHandler(Protocol):
	"""Executes one kind of step against a page.

	``can_handle`` must be pure; ``execute`` resolves templated fields against
	the context and returns outputs and an optional jump.
	"""

	def can_handle(self, step: NavigationStep) -> bool: ...

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult: ...


def require(value: Any, field: str, step: NavigationStep) -> Any:
	"""Raise ``UnresolvedSelectorError`` when a required field resolved to nothing."""
	if value is None or (isinstance(value, str) and value.strip() == ''):
		raise UnresolvedSelectorError(f'{step.type} step requires a non-empty {field}', step_type=step.type)
	return value


def resolve_selector(step: NavigationStep, context: NavigationContext, field: str = 'selector') -> str:
	raw = step.selector if field == 'selector' else step.extra(field)
	return str(require(resolve(raw, context), field, step))


def step_output(step: NavigationStep, value: Any) -> StepResult:
	"""Result carrying ``{step.name: value}`` when the step is named."""
	if not step.name:
		return StepResult()
	return StepResult(outputs={step.name: value})


async def visible_locator(page: 'PlaywrightPage', selector: str, timeout: int) -> 'PlaywrightLocator':
	"""First element matching ``selector`` once it is visible."""
	locator = page.locator(selector).first
	try:
		await locator.wait_for(state='visible', timeout=timeout)
	except PlaywrightTimeoutError as e:
		raise NavigationTimeoutError(f'Timed out after {timeout}ms waiting for {selector!r} to be visible') from e
	return locator
