"""XPath selector strategy."""

from browser_flow.extraction.strategies.css import CssSelectorStrategy
from browser_flow.extraction.views import SelectorType


class XPathSelectorStrategy(CssSelectorStrategy):
	"""Same locating and reading rules as CSS, with XPath expressions."""

	selector_type = SelectorType.XPATH

	def build_selector(self, selector: str) -> str:
		if selector.startswith('xpath='):
			return selector
		return f'xpath={selector}'
