"""Navigation context and ``{{path}}`` interpolation."""

import json
import re
from collections.abc import Mapping, Sequence
from typing import Any, Dict

NavigationContext = Dict[str, Any]

PLACEHOLDER_PATTERN = re.compile(r'\{\{([^}]+)\}\}')

# Placeholder names that fall back to another context key when absent
PATH_ALIASES = {'index': 'currentIndex'}

INDEX_PATTERN = re.compile(r'\[\s*([^\]]*?)\s*\]')

_MISSING = object()


def split_path(path: str) -> list[str]:
	"""Split ``a.b[0].c`` (or ``a.b.0.c``) into ``['a', 'b', '0', 'c']``."""
	normalized = INDEX_PATTERN.sub(lambda m: '.' + m.group(1).strip('\'"'), path.strip())
	return [s.strip() for s in normalized.split('.') if s.strip()]


def _walk(context: Any, segments: list[str]) -> Any:
	current = context
	for segment in segments:
		if isinstance(current, Mapping):
			if segment not in current:
				return _MISSING
			current = current[segment]
		elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
			try:
				current = current[int(segment)]
			except (ValueError, IndexError):
				return _MISSING
		else:
			return _MISSING
	return current


def get_path(context: Any, path: str, default: Any = None) -> Any:
	"""Look up a dotted path (``a.b.0.c`` or ``a.b[0].c``) in a nested dict/list tree.

	Args:
		context: Root container
		path: Dotted path; numeric or bracketed segments index into lists
		default: Returned when any segment is missing

	Returns:
		The value at ``path`` or ``default``
	"""
	segments = split_path(path)
	if not segments:
		return default
	value = _walk(context, segments)
	if value is _MISSING and segments[0] in PATH_ALIASES:
		value = _walk(context, [PATH_ALIASES[segments[0]], *segments[1:]])
	return default if value is _MISSING else value


def _child(container: Any, segment: str) -> Any:
	if isinstance(container, list):
		if segment.isdigit() and int(segment) < len(container):
			return container[int(segment)]
		return None
	return container.get(segment)


def _assign(container: Any, segment: str, value: Any) -> None:
	if isinstance(container, list):
		if not segment.isdigit():
			raise ValueError(f'Cannot write key {segment!r} into a list')
		index = int(segment)
		container.extend([None] * (index + 1 - len(container)))
		container[index] = value
	else:
		container[segment] = value


def set_path(context: Dict[str, Any], path: str, value: Any) -> None:
	"""Write ``value`` at a dotted or bracketed path.

	Existing lists are indexed into. Missing containers are created as lists
	when the next segment is an index and as dicts otherwise.
	"""
	segments = split_path(path)
	if not segments:
		raise ValueError('Empty context path')
	current: Any = context
	for segment, next_segment in zip(segments, segments[1:]):
		child = _child(current, segment)
		if not isinstance(child, (dict, list)):
			child = [] if next_segment.isdigit() else {}
			_assign(current, segment, child)
		current = child
	_assign(current, segments[-1], value)


def format_value(value: Any) -> str:
	"""Render a context value for substitution into a string."""
	if value is None:
		return ''
	if isinstance(value, bool):
		return 'true' if value else 'false'
	if isinstance(value, float) and value.is_integer():
		return str(int(value))
	if isinstance(value, (dict, list, tuple)):
		return json.dumps(value, default=str)
	return str(value)


def resolve(value: Any, context: NavigationContext) -> Any:
	"""Resolve a possibly-templated step field against the context.

	Callables are invoked with the context, non-string values are returned
	unchanged, and each ``{{path}}`` placeholder in a string is replaced by the
	value found at that path. Missing paths resolve to the empty string.

	Args:
		value: Raw step field
		context: Current navigation context

	Returns:
		The resolved value
	"""
	if callable(value):
		return value(context)
	if not isinstance(value, str) or '{{' not in value:
		return value

	def _substitute(match: re.Match) -> str:
		return format_value(get_path(context, match.group(1)))

	return PLACEHOLDER_PATTERN.sub(_substitute, value)


def has_placeholders(value: Any) -> bool:
	return isinstance(value, str) and PLACEHOLDER_PATTERN.search(value) is not None
