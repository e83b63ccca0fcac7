"""Selector configuration models for data extraction."""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SelectorType(str, Enum):
	"""How the target of an extraction is located."""

	CSS = 'css'
	XPATH = 'xpath'
	REGEX = 'regex'
	FUNCTION = 'function'


class ExtractionMode(str, Enum):
	"""What is read from the located element(s)."""

	TEXT = 'text'
	ATTRIBUTE = 'attribute'
	HTML = 'html'
	LIST = 'list'
	TABLE = 'table'


class DataType(str, Enum):
	"""Optional coercion applied to the extracted value."""

	STRING = 'string'
	NUMBER = 'number'
	BOOLEAN = 'boolean'
	OBJECT = 'object'
	ARRAY = 'array'


class SelectorConfig(BaseModel):
	"""One extraction: where to look, what to read and how to shape it."""

	model_config = ConfigDict(
		extra='ignore',
		alias_generator=to_camel,
		populate_by_name=True,
		arbitrary_types_allowed=True,
	)

	type: SelectorType = SelectorType.CSS
	selector: Optional[str] = None
	selectors: List[str] = Field(default_factory=list, description='Fallback selectors tried in order')
	mode: Optional[ExtractionMode] = None
	attribute: Optional[str] = None
	multiple: bool = False
	source: Optional[str] = Field(default=None, description="'html', 'text' or a selector (regex), 'html' (css/xpath)")
	pattern: Optional[str] = None
	flags: Optional[str] = None
	group: int = 0
	function: Any = Field(default=None, description='Callable or JavaScript function body')
	headers: Optional[List[str]] = None
	fields: Optional[Dict[str, 'SelectorConfig']] = None
	default_value: Any = None
	continue_on_error: bool = False
	data_type: Optional[DataType] = None
	name: Optional[str] = None

	@field_validator('fields', mode='before')
	@classmethod
	def _normalize_fields(cls, value: Any) -> Any:
		"""Accept ``{name: config}``, ``{name: 'selector'}`` or ``[{name, ...}]``."""
		if value is None:
			return None
		if isinstance(value, list):
			value = {item['name']: item for item in value}
		normalized = {}
		for key, field_config in value.items():
			if isinstance(field_config, str):
				field_config = {'selector': field_config}
			normalized[key] = field_config
		return normalized

	@property
	def read_kind(self) -> ExtractionMode:
		"""TEXT, ATTRIBUTE or HTML: what is read from each matched element."""
		if self.mode in (ExtractionMode.TEXT, ExtractionMode.ATTRIBUTE, ExtractionMode.HTML):
			return self.mode
		if self.source == 'html':
			return ExtractionMode.HTML
		if self.attribute:
			return ExtractionMode.ATTRIBUTE
		return ExtractionMode.TEXT

	@property
	def returns_list(self) -> bool:
		return self.multiple or self.mode in (ExtractionMode.LIST, ExtractionMode.TABLE)

	def candidate_selectors(self) -> List[str]:
		candidates = [self.selector] if self.selector else []
		return candidates + [s for s in self.selectors if s and s not in candidates]

	def empty_value(self) -> Union[None, list, Any]:
		"""Value returned when nothing matches."""
		if self.default_value is not None:
			return self.default_value
		return [] if self.returns_list else None


SelectorConfig.model_rebuild()
