"""CSS selector strategy."""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from browser_flow.extraction.strategies.base import read_locator
from browser_flow.extraction.views import SelectorConfig, SelectorType

if TYPE_CHECKING:
	from playwright.async_api import Locator as PlaywrightLocator

	from browser_flow.extraction.strategies.base import ExtractionScope

logger = logging.getLogger(__name__)


class CssSelectorStrategy:
	"""Locates elements with CSS selectors, trying ``selectors`` fallbacks in order."""

	selector_type = SelectorType.CSS

	def can_handle(self, config: SelectorConfig) -> bool:
		return config.type == self.selector_type

	def build_selector(self, selector: str) -> str:
		return selector

	async def locate(self, scope: 'ExtractionScope', config: SelectorConfig) -> Optional['PlaywrightLocator']:
		"""First candidate selector with at least one match, else the primary one.

		Returns ``None`` when the config has no selector at all and the scope is
		already an element (the element itself is the target).
		"""
		candidates = config.candidate_selectors()
		if not candidates:
			return None

		for selector in candidates:
			locator = scope.locator(self.build_selector(selector))
			if await locator.count() > 0:
				if selector != candidates[0]:
					logger.debug(f'🎯 Fallback selector matched: {selector}')
				return locator
		return scope.locator(self.build_selector(candidates[0]))

	async def extract(
		self,
		scope: 'ExtractionScope',
		config: SelectorConfig,
		context: Optional[Dict[str, Any]] = None,
	) -> Any:
		locator = await self.locate(scope, config)
		if locator is None:
			locator = scope
		return await read_locator(locator, config)
