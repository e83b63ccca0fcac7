"""Environment-driven configuration for the navigation engine."""

import logging
import os
from functools import cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()

logger = logging.getLogger(__name__)

ENV_PREFIX = 'BROWSER_FLOW_'


def _env(name: str) -> str | None:
	value = os.getenv(f'{ENV_PREFIX}{name}')
	if value is None or value.strip() == '':
		return None
	return value.strip()


def _env_int(name: str, default: int | None) -> int | None:
	raw = _env(name)
	if raw is None:
		return default
	try:
		return int(raw)
	except ValueError:
		logger.warning(f'⚠️ Ignoring {ENV_PREFIX}{name}={raw!r}: not an integer')
		return default


def _env_bool(name: str, default: bool) -> bool:
	raw = _env(name)
	if raw is None:
		return default
	return raw.lower() in ('1', 'true', 'yes', 'on')


class EngineConfig(BaseModel):
	"""Process-wide defaults, read once from ``BROWSER_FLOW_*`` variables (and ``.env``)."""

	model_config = ConfigDict(extra='forbid')

	navigation_timeout_ms: int = Field(default=30000, description='Timeout for the initial page load')
	max_steps: int | None = Field(default=1000, description='Upper bound on dispatched steps per flow')
	max_time_ms: int | None = Field(default=None, description='Wall-clock budget per flow')
	script_errors_fatal: bool = Field(default=False, description='Fail the flow when a page script raises')
	screenshots: bool = Field(default=False, description='Capture a screenshot before and after each step')
	screenshots_path: str = Field(default='./screenshots', description='Directory for step screenshots')
	logging_level: str = Field(default='info', description='Level for the browser_flow logger')

	@classmethod
	def from_env(cls) -> 'EngineConfig':
		"""Build the configuration from the current environment."""
		defaults = cls()
		return cls(
			navigation_timeout_ms=_env_int('NAVIGATION_TIMEOUT_MS', defaults.navigation_timeout_ms) or defaults.navigation_timeout_ms,
			max_steps=_env_int('MAX_STEPS', defaults.max_steps),
			max_time_ms=_env_int('MAX_TIME_MS', defaults.max_time_ms),
			script_errors_fatal=_env_bool('SCRIPT_ERRORS_FATAL', defaults.script_errors_fatal),
			screenshots=_env_bool('SCREENSHOTS', defaults.screenshots),
			screenshots_path=_env('SCREENSHOTS_PATH') or defaults.screenshots_path,
			logging_level=(_env('LOGGING_LEVEL') or defaults.logging_level).lower(),
		)


@cache
def get_config() -> EngineConfig:
	return EngineConfig.from_env()
