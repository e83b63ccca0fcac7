from browser_flow.extraction.strategies.base import SelectorStrategy, read_locator
from browser_flow.extraction.strategies.css import CssSelectorStrategy
from browser_flow.extraction.strategies.function import FunctionSelectorStrategy
from browser_flow.extraction.strategies.regex import RegexSelectorStrategy
from browser_flow.extraction.strategies.xpath import XPathSelectorStrategy

__all__ = [
	'SelectorStrategy',
	'CssSelectorStrategy',
	'XPathSelectorStrategy',
	'RegexSelectorStrategy',
	'FunctionSelectorStrategy',
	'read_locator',
]
