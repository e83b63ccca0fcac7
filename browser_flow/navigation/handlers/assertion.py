"""Assert step implementation."""

import logging
from typing import TYPE_CHECKING

from browser_flow.exceptions import FlowDefinitionError, StepAssertionError
from browser_flow.navigation.context import NavigationContext, format_value, resolve
from browser_flow.navigation.handlers.base import resolve_selector
from browser_flow.navigation.views import NavigationStep, StepResult
from browser_flow.navigation.waits import poll_until, step_timeout

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)

DEFAULT_ASSERT_TIMEOUT_MS = 5000
ASSERTION_TYPES = ('exists', 'isVisible', 'isHidden', 'containsText', 'hasAttribute', 'attributeEquals')


class AssertStepHandler:
	"""Polls a page condition until it holds or ``timeout`` (default 5s) runs out.

	``assertionType`` is one of ``exists`` (default), ``isVisible``,
	``isHidden``, ``containsText`` (``expectedText``), ``hasAttribute``
	(``attributeName``) or ``attributeEquals`` (``attributeName`` and
	``expectedValue``).
	"""

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type == 'assert'

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		selector = resolve_selector(step, context)
		assertion = step.extra('assertionType', 'exists')
		if assertion not in ASSERTION_TYPES:
			raise FlowDefinitionError(f'Unknown assertionType {assertion!r}', step_type=step.type)
		timeout = step_timeout(step, context, default=DEFAULT_ASSERT_TIMEOUT_MS)
		expected_text = format_value(resolve(step.extra('expectedText'), context))
		attribute = resolve(step.extra('attributeName'), context)
		expected_value = format_value(resolve(step.extra('expectedValue'), context))

		if assertion in ('hasAttribute', 'attributeEquals') and not attribute:
			raise FlowDefinitionError(f'{assertion} assertion requires attributeName', step_type=step.type)

		locator = page.locator(selector)

		async def check() -> bool:
			if assertion == 'isHidden':
				return await locator.count() == 0 or await locator.first.is_hidden()
			if await locator.count() == 0:
				return False
			first = locator.first
			if assertion == 'exists':
				return True
			if assertion == 'isVisible':
				return await first.is_visible()
			if assertion == 'containsText':
				return expected_text in (await first.text_content() or '')
			value = await first.get_attribute(attribute)
			if assertion == 'hasAttribute':
				return value is not None
			return value == expected_value

		if await poll_until(check, timeout):
			logger.debug(f'✅ Assertion {assertion} held for {selector}')
			return StepResult()
		raise StepAssertionError(f'Assertion {assertion} failed for {selector!r} after {timeout}ms', step_type=step.type)
