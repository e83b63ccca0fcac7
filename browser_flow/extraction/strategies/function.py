"""Custom function strategy."""

import inspect
import json
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from browser_flow.extraction.strategies.base import is_page
from browser_flow.extraction.views import SelectorConfig, SelectorType

if TYPE_CHECKING:
	from browser_flow.extraction.strategies.base import ExtractionScope

logger = logging.getLogger(__name__)


class FunctionSelectorStrategy:
	"""Runs a Python callable or a JavaScript function body in the page.

	A callable receives ``(scope, context)`` and may be sync or async. A string
	is the body of a JavaScript function of ``(element, context)``; on a page
	``element`` is ``document``.
	"""

	def can_handle(self, config: SelectorConfig) -> bool:
		return config.type == SelectorType.FUNCTION

	async def extract(
		self,
		scope: 'ExtractionScope',
		config: SelectorConfig,
		context: Optional[Dict[str, Any]] = None,
	) -> Any:
		function = config.function
		if function is None:
			raise ValueError('Function extraction requires a function')

		if callable(function):
			result = function(scope, context or {})
			if inspect.isawaitable(result):
				result = await result
			return result

		body = str(function).strip()
		if not body.startswith('return') and 'return ' not in body:
			body = f'return ({body});'
		payload = json.loads(json.dumps(context or {}, default=str))
		expression = f'(element, context) => {{ {body} }}'
		if is_page(scope):
			return await scope.evaluate(f'(context) => (({expression})(document, context))', payload)
		return await scope.evaluate(expression, payload)
