"""Regular expression strategy."""

import logging
import re
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from browser_flow.extraction.strategies.base import is_page
from browser_flow.extraction.views import DataType, SelectorConfig, SelectorType

if TYPE_CHECKING:
	from browser_flow.extraction.strategies.base import ExtractionScope

logger = logging.getLogger(__name__)

# JavaScript-style flag letters; 'g' only means "all matches" and maps to nothing
REGEX_FLAGS = {'i': re.IGNORECASE, 'm': re.MULTILINE, 's': re.DOTALL, 'g': 0, 'u': 0}


def compile_pattern(pattern: str, flags: Optional[str]) -> re.Pattern:
	"""Compile a pattern, accepting ``/body/`` literals and JS flag letters."""
	if len(pattern) >= 2 and pattern.startswith('/') and pattern.endswith('/'):
		pattern = pattern[1:-1]
	re_flags = 0
	for letter in flags or '':
		re_flags |= REGEX_FLAGS.get(letter, 0)
	return re.compile(pattern, re_flags)


def _group(match: re.Match, group: int) -> Optional[str]:
	if group < 0 or group > (match.re.groups or 0):
		return match.group(0)
	return match.group(group)


def _to_number(text: str) -> Optional[float]:
	for candidate in (text, re.sub(r'[^0-9.\-]', '', text)):
		try:
			number = float(candidate)
		except ValueError:
			continue
		return int(number) if number.is_integer() else number
	return None


class RegexSelectorStrategy:
	"""Applies ``pattern`` to the page HTML, body text or one element's text."""

	def can_handle(self, config: SelectorConfig) -> bool:
		return config.type == SelectorType.REGEX

	async def _source_text(self, scope: 'ExtractionScope', source: Optional[str]) -> Optional[str]:
		if is_page(scope):
			if source in (None, '', 'html'):
				return await scope.content()
			if source == 'text':
				return await scope.inner_text('body')
		else:
			if source in (None, '', 'html'):
				return await scope.inner_html()
			if source == 'text':
				return await scope.inner_text()

		locator = scope.locator(source)
		if await locator.count() == 0:
			logger.warning(f'⚠️ Regex source selector {source!r} not found')
			return None
		return await locator.first.text_content() or ''

	async def extract(
		self,
		scope: 'ExtractionScope',
		config: SelectorConfig,
		context: Optional[Dict[str, Any]] = None,
	) -> Any:
		if not config.pattern:
			raise ValueError('Regex extraction requires a pattern')
		regex = compile_pattern(config.pattern, config.flags)

		text = await self._source_text(scope, config.source)
		if text is None:
			return config.empty_value()

		if config.multiple:
			results: List[Any] = [value for value in (_group(m, config.group) for m in regex.finditer(text)) if value]
			return results or config.empty_value()

		match = regex.search(text)
		if match is None:
			return config.empty_value()
		value = _group(match, config.group)
		if not value:
			return config.empty_value()
		if config.data_type == DataType.NUMBER:
			return _to_number(value)
		return value
