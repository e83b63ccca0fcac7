"""Selector strategy contract and shared locator readers."""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Protocol, Union, runtime_checkable

from browser_flow.extraction.views import ExtractionMode, SelectorConfig

if TYPE_CHECKING:
	from playwright.async_api import Locator as PlaywrightLocator
	from playwright.async_api import Page as PlaywrightPage

	ExtractionScope = Union[PlaywrightPage, PlaywrightLocator]

logger = logging.getLogger(__name__)


@runtime_checkable
class SelectorStrategy(Protocol):
	"""Extracts a value from a page (or an element scope) for one selector config."""

	def can_handle(self, config: SelectorConfig) -> bool: ...

	async def extract(
		self,
		scope: 'ExtractionScope',
		config: SelectorConfig,
		context: Optional[Dict[str, Any]] = None,
	) -> Any: ...


def is_page(scope: Any) -> bool:
	"""Pages expose ``content()``; locators do not."""
	return hasattr(scope, 'content') and hasattr(scope, 'goto')


async def read_element(locator: 'PlaywrightLocator', config: SelectorConfig) -> Any:
	"""Read text, an attribute or inner HTML from a single element."""
	kind = config.read_kind
	if kind == ExtractionMode.HTML:
		return await locator.inner_html()
	if kind == ExtractionMode.ATTRIBUTE:
		return await locator.get_attribute(config.attribute or '')
	text = await locator.text_content()
	return text.strip() if text is not None else None


async def read_table(locator: 'PlaywrightLocator', config: SelectorConfig) -> List[Any]:
	"""Read the first matched table as rows of cell text.

	With ``headers`` configured each row becomes a dict keyed by header.
	"""
	rows = locator.first.locator('tr')
	row_count = await rows.count()
	table: List[Any] = []
	for i in range(row_count):
		cells = [c.strip() for c in await rows.nth(i).locator('th, td').all_text_contents()]
		if not cells:
			continue
		if config.headers:
			if cells == list(config.headers):
				continue
			table.append({header: cells[j] if j < len(cells) else None for j, header in enumerate(config.headers)})
		else:
			table.append(cells)
	return table


async def read_locator(locator: 'PlaywrightLocator', config: SelectorConfig) -> Any:
	"""Read a located set of elements according to the config's mode.

	Returns:
		A list for list/table/multiple configs, otherwise a single value. Zero
		matches give the config's empty value.
	"""
	count = await locator.count()
	if count == 0:
		return config.empty_value()

	if config.mode == ExtractionMode.TABLE:
		return await read_table(locator, config)

	if config.returns_list:
		if config.read_kind == ExtractionMode.TEXT:
			return [t.strip() for t in await locator.all_text_contents()]
		return [await read_element(locator.nth(i), config) for i in range(count)]

	value = await read_element(locator.first, config)
	if value is None and config.default_value is not None:
		return config.default_value
	return value
