"""Extraction engine: dispatches selector configs to strategies."""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from browser_flow.extraction.strategies import (
	CssSelectorStrategy,
	FunctionSelectorStrategy,
	RegexSelectorStrategy,
	SelectorStrategy,
	XPathSelectorStrategy,
)
from browser_flow.extraction.views import DataType, SelectorConfig

if TYPE_CHECKING:
	from browser_flow.extraction.strategies.base import ExtractionScope

logger = logging.getLogger(__name__)


def coerce(value: Any, data_type: Optional[DataType]) -> Any:
	"""Apply a ``dataType`` conversion; values that cannot convert become ``None``."""
	if data_type is None or value is None:
		return value
	if isinstance(value, list) and data_type != DataType.ARRAY:
		return [coerce(item, data_type) for item in value]
	if data_type == DataType.NUMBER:
		if isinstance(value, (int, float)) and not isinstance(value, bool):
			return value
		cleaned = ''.join(ch for ch in str(value) if ch.isdigit() or ch in '.-')
		try:
			number = float(cleaned)
		except ValueError:
			return None
		return int(number) if number.is_integer() else number
	if data_type == DataType.BOOLEAN:
		if isinstance(value, bool):
			return value
		return str(value).strip().lower() not in ('', 'false', '0', 'no', 'off', 'null', 'none')
	if data_type == DataType.STRING:
		return str(value)
	return value


class ExtractionEngine:
	"""Runs extractions against a page or an element scope.

	Strategies are scanned in registration order and the first whose
	``can_handle`` accepts the config wins.
	"""

	def __init__(self, strategies: Optional[List[SelectorStrategy]] = None):
		self.strategies: List[SelectorStrategy] = strategies or [
			CssSelectorStrategy(),
			XPathSelectorStrategy(),
			RegexSelectorStrategy(),
			FunctionSelectorStrategy(),
		]

	def register(self, strategy: SelectorStrategy) -> None:
		self.strategies.append(strategy)

	def get_strategy(self, config: SelectorConfig) -> SelectorStrategy:
		for strategy in self.strategies:
			if strategy.can_handle(config):
				return strategy
		raise ValueError(f'No selector strategy for type {config.type.value!r}')

	async def extract(
		self,
		scope: 'ExtractionScope',
		config: SelectorConfig,
		context: Optional[Dict[str, Any]] = None,
	) -> Any:
		"""Extract one value (or list/object) described by ``config``.

		Args:
			scope: Page or locator to search within
			config: Selector configuration
			context: Navigation context, passed to function strategies

		Returns:
			The extracted value; on error the default value when ``continue_on_error`` is set
		"""
		try:
			if config.fields:
				return await self._extract_object(scope, config, context)
			value = await self.get_strategy(config).extract(scope, config, context)
			return coerce(value, config.data_type)
		except Exception as e:
			if not config.continue_on_error:
				raise
			logger.warning(f'⚠️ Extraction of {config.name or config.selector or config.type.value} failed, using default: {e}')
			return config.default_value

	async def _extract_object(
		self,
		scope: 'ExtractionScope',
		config: SelectorConfig,
		context: Optional[Dict[str, Any]],
	) -> Any:
		"""Extract ``fields`` relative to the element(s) matched by ``config``."""
		strategy = self.get_strategy(config)
		locate = getattr(strategy, 'locate', None)
		if locate is None:
			raise ValueError(f'Field extraction needs a css or xpath base, got {config.type.value!r}')

		base = await locate(scope, config)
		if base is None:
			return await self._extract_fields(scope, config, context)

		count = await base.count()
		if config.multiple:
			return [await self._extract_fields(base.nth(i), config, context) for i in range(count)]
		if count == 0:
			return config.empty_value()
		return await self._extract_fields(base.first, config, context)

	async def _extract_fields(
		self,
		element: 'ExtractionScope',
		config: SelectorConfig,
		context: Optional[Dict[str, Any]],
	) -> Dict[str, Any]:
		item: Dict[str, Any] = {}
		for name, field_config in (config.fields or {}).items():
			item[name] = await self.extract(element, field_config, context)
		return item
