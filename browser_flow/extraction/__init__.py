from browser_flow.extraction.service import ExtractionEngine
from browser_flow.extraction.views import DataType, ExtractionMode, SelectorConfig, SelectorType

__all__ = ['ExtractionEngine', 'SelectorConfig', 'SelectorType', 'ExtractionMode', 'DataType']
