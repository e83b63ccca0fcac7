"""Extract step implementation."""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from pydantic import ValidationError

from browser_flow.exceptions import FlowDefinitionError
from browser_flow.extraction import ExtractionEngine, SelectorConfig, SelectorType
from browser_flow.navigation.context import NavigationContext, resolve
from browser_flow.navigation.handlers.base import require
from browser_flow.navigation.views import NavigationStep, StepResult
from browser_flow.navigation.waits import handle_wait_for, step_timeout

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_NAME = 'extractedData'

# Step keys copied into the selector config (JSON names)
SELECTOR_KEYS = (
	'selectors',
	'mode',
	'attribute',
	'multiple',
	'source',
	'pattern',
	'flags',
	'group',
	'function',
	'fields',
	'headers',
	'defaultValue',
	'continueOnError',
	'dataType',
)


class ExtractStepHandler:
	"""Extracts data from the page and stores it under ``name``.

	The step's ``selectorType`` (default ``css``) picks the strategy.
	``fields`` extracts an object relative to the element matched by
	``selector``; with ``multiple`` it extracts one object per match.
	"""

	def __init__(self, extraction_engine: Optional[ExtractionEngine] = None):
		self.extraction_engine = extraction_engine or ExtractionEngine()

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type == 'extract'

	def build_config(self, step: NavigationStep, context: NavigationContext) -> SelectorConfig:
		data: Dict[str, Any] = {
			'type': step.extra('selectorType', SelectorType.CSS.value),
			'selector': resolve(step.selector, context),
			'name': step.name,
		}
		if step.extra('list'):
			data['mode'] = 'list'
		for key in SELECTOR_KEYS:
			value = step.extra(key)
			if value is not None:
				data[key] = resolve(value, context) if isinstance(value, str) and key != 'function' else value
		try:
			return SelectorConfig.model_validate(data)
		except ValidationError as e:
			raise FlowDefinitionError(f'Invalid extract step: {e}', step_type=step.type) from e

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		config = self.build_config(step, context)
		if config.type in (SelectorType.CSS, SelectorType.XPATH) and not config.selectors:
			require(config.selector, 'selector', step)
		elif config.type == SelectorType.REGEX:
			require(config.pattern, 'pattern', step)
		elif config.type == SelectorType.FUNCTION:
			require(config.function, 'function', step)

		if step.wait_for is not None:
			await handle_wait_for(page, step.wait_for, context, step_timeout(step, context))

		name = step.name or DEFAULT_OUTPUT_NAME
		logger.info(f'📥 Extracting {name} from {config.selector or config.type.value}')
		data = await self.extraction_engine.extract(page, config, context)
		return StepResult(outputs={name: data})
