"""Loading stored flow definitions from files or URLs."""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

import anyio
import httpx
from pydantic import ValidationError

from browser_flow.exceptions import FlowDefinitionError
from browser_flow.navigation.service import NavigationEngine
from browser_flow.navigation.views import FlowDefinition, FlowResult, NavigationOptions

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT_S = 30.0


def parse_flow_definition(data: Union[str, bytes, Dict[str, Any]]) -> FlowDefinition:
	"""Validate a ``{startUrl, steps, variables, options}`` document."""
	if isinstance(data, (str, bytes)):
		try:
			data = json.loads(data)
		except json.JSONDecodeError as e:
			raise FlowDefinitionError(f'Flow definition is not valid JSON: {e}') from e
	if not isinstance(data, dict):
		raise FlowDefinitionError('Flow definition must be a JSON object')
	try:
		return FlowDefinition.model_validate(data)
	except ValidationError as e:
		raise FlowDefinitionError(f'Invalid flow definition: {e}') from e


async def load_flow_definition(source: Union[str, Path], client: Optional[httpx.AsyncClient] = None) -> FlowDefinition:
	"""Load a flow definition from a local JSON file or an http(s) URL.

	Args:
		source: File path or URL
		client: Optional client reused for URL sources

	Returns:
		The parsed definition
	"""
	source_str = str(source)
	if source_str.startswith(('http://', 'https://')):
		logger.debug(f'🌐 Fetching flow definition from {source_str}')
		try:
			if client is not None:
				response = await client.get(source_str)
			else:
				async with httpx.AsyncClient(timeout=DEFAULT_FETCH_TIMEOUT_S, follow_redirects=True) as owned:
					response = await owned.get(source_str)
			response.raise_for_status()
		except httpx.HTTPError as e:
			raise FlowDefinitionError(f'Could not fetch flow definition from {source_str}: {e}') from e
		return parse_flow_definition(response.content)

	path = anyio.Path(source_str)
	if not await path.exists():
		raise FlowDefinitionError(f'Flow definition file not found: {source_str}')
	logger.debug(f'📄 Reading flow definition from {source_str}')
	return parse_flow_definition(await path.read_text(encoding='utf-8'))


async def run_flow_definition(
	page: 'PlaywrightPage',
	definition: FlowDefinition,
	variables: Optional[Dict[str, Any]] = None,
) -> FlowResult:
	"""Run a stored definition; ``variables`` override the stored ones."""
	options = NavigationOptions.model_validate(definition.options) if definition.options else None
	engine = NavigationEngine(page, options=options)
	return await engine.execute_flow(
		definition.start_url,
		definition.steps,
		{**definition.variables, **(variables or {})},
	)
