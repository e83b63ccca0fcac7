"""Models for navigation flows: steps, step results and flow results."""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from browser_flow.config import get_config

JumpTarget = Union[int, str]


class NavigationStep(BaseModel):
	"""One declarative step of a flow.

	Only fields shared by several step types are declared. Type-specific
	fields (``thenSteps``, ``mouseTarget``, ``fields``, ...) are kept as extras
	under their JSON name and read with :meth:`extra`.
	"""

	model_config = ConfigDict(
		extra='allow',
		frozen=True,
		alias_generator=to_camel,
		populate_by_name=True,
		arbitrary_types_allowed=True,
	)

	type: str = Field(description='Step type used to pick a handler')
	selector: Optional[str] = None
	value: Any = None
	url: Optional[str] = None
	script: Optional[str] = None
	wait_for: Any = Field(default=None, description='Number (ms), load state or selector to wait for')
	timeout: Any = Field(default=None, description='Timeout in ms for waits embedded in the step (may be templated)')
	duration: Any = Field(default=None, description='Duration in ms (may be templated)')
	condition: Any = None
	jump_to: Optional[JumpTarget] = Field(default=None, description='Step index (0-based) or label to continue at')
	name: Optional[str] = Field(default=None, description='Output key written into the context')
	label: Optional[str] = Field(default=None, description='Jump target name for this step')
	optional: bool = Field(default=False, description='Log and continue when the step fails')
	fail_on_error: Optional[bool] = None
	description: Optional[str] = None

	def extra(self, key: str, default: Any = None) -> Any:
		"""Read a type-specific field by its JSON (camelCase) name."""
		extras = self.model_extra or {}
		if key in extras:
			return extras[key]
		return default

	def derive(self, **updates: Any) -> 'NavigationStep':
		"""Build a synthetic step from this one with some fields replaced.

		Keys use the JSON names, e.g. ``derive(type='mousemove', waitFor=None)``.
		"""
		data = self.model_dump(by_alias=True, exclude_none=True)
		data.update(updates)
		return NavigationStep.model_validate({k: v for k, v in data.items() if v is not None})

	def describe(self) -> str:
		if self.description:
			return f'{self.type} ({self.description})'
		if self.selector:
			return f'{self.type} {self.selector}'
		if self.url:
			return f'{self.type} {self.url}'
		return self.type


class StepResult(BaseModel):
	"""What a handler hands back to the interpreter."""

	model_config = ConfigDict(extra='forbid', arbitrary_types_allowed=True)

	outputs: Dict[str, Any] = Field(default_factory=dict, description='Keys merged into the context')
	jump_to: Optional[JumpTarget] = Field(default=None, description='Index or label to continue at')


class FlowStatus(str, Enum):
	"""Interpreter states. ``RUNNING`` never appears in a returned result."""

	RUNNING = 'running'
	COMPLETED = 'completed'
	FAILED = 'failed'


class NavigationOptions(BaseModel):
	"""Per-run engine options. Unset values come from :class:`EngineConfig`."""

	model_config = ConfigDict(extra='ignore', alias_generator=to_camel, populate_by_name=True)

	navigation_timeout_ms: int = Field(default_factory=lambda: get_config().navigation_timeout_ms)
	max_steps: Optional[int] = Field(default_factory=lambda: get_config().max_steps)
	max_time_ms: Optional[int] = Field(default_factory=lambda: get_config().max_time_ms)
	script_errors_fatal: bool = Field(default_factory=lambda: get_config().script_errors_fatal)
	screenshots: bool = Field(default_factory=lambda: get_config().screenshots)
	screenshots_path: str = Field(default_factory=lambda: get_config().screenshots_path)


class FlowResult(BaseModel):
	"""Outcome of one flow run."""

	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, arbitrary_types_allowed=True)

	id: str
	start_url: Optional[str] = None
	status: FlowStatus
	steps_executed: int = 0
	result: Dict[str, Any] = Field(default_factory=dict, description='Accumulated context at termination')
	screenshots: List[str] = Field(default_factory=list)
	timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
	error: Optional[str] = None
	error_type: Optional[str] = None

	@property
	def succeeded(self) -> bool:
		return self.status == FlowStatus.COMPLETED

	def to_json_dict(self) -> Dict[str, Any]:
		"""Serialize with camelCase keys, omitting empty error fields."""
		data = json.loads(json.dumps(self.model_dump(by_alias=True), default=str))
		if self.error is None:
			data.pop('error', None)
			data.pop('errorType', None)
		return data


class FlowDefinition(BaseModel):
	"""A stored flow: ``{startUrl, steps, variables, options}``."""

	model_config = ConfigDict(extra='ignore', alias_generator=to_camel, populate_by_name=True)

	start_url: Optional[str] = None
	steps: List[Dict[str, Any]] = Field(default_factory=list)
	variables: Dict[str, Any] = Field(default_factory=dict)
	options: Dict[str, Any] = Field(default_factory=dict)
