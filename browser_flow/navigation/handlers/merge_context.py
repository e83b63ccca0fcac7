"""Merge context step implementation."""

import copy
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Dict

from browser_flow.exceptions import FlowDefinitionError
from browser_flow.navigation.context import NavigationContext, get_path, resolve, set_path, split_path
from browser_flow.navigation.handlers.base import require
from browser_flow.navigation.views import NavigationStep, StepResult

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

logger = logging.getLogger(__name__)

MERGE_STRATEGIES = ('overwrite', 'union', 'append', 'ignore')


def apply_strategy(target_value: Any, source_value: Any, strategy: str) -> Any:
	if strategy == 'ignore':
		return target_value
	if strategy == 'union':
		if isinstance(target_value, list) and isinstance(source_value, list):
			return target_value + [item for item in source_value if item not in target_value]
		if isinstance(target_value, list):
			return target_value
		return copy.deepcopy(source_value)
	if strategy == 'append':
		additions = source_value if isinstance(source_value, list) else [source_value]
		if isinstance(target_value, list):
			return target_value + copy.deepcopy(additions)
		if target_value is not None:
			return [target_value, *copy.deepcopy(additions)]
		return copy.deepcopy(additions)
	return copy.deepcopy(source_value)


def merge_values(target: Any, source: Any, strategies: Dict[str, str], default_strategy: str) -> Any:
	"""Merge ``source`` into a copy of ``target`` key by key.

	Dicts merge per key with that key's strategy (falling back to
	``default_strategy``); anything else is merged as a single value.
	"""
	if isinstance(target, dict) and isinstance(source, dict):
		merged = copy.deepcopy(target)
		for key, source_value in source.items():
			merged[key] = apply_strategy(merged.get(key), source_value, strategies.get(key, default_strategy))
		return merged
	return apply_strategy(target, source, default_strategy)


class MergeContextStepHandler:
	"""Merges the value at ``source`` into the value at ``target`` (dotted paths).

	The merged tree is returned as the output for the target's top-level key,
	so the context is only changed through the interpreter's merge.
	"""

	def can_handle(self, step: NavigationStep) -> bool:
		return step.type == 'mergeContext'

	async def execute(self, step: NavigationStep, context: NavigationContext, page: 'PlaywrightPage') -> StepResult:
		source_path = str(require(resolve(step.extra('source'), context), 'source', step))
		target_path = str(require(resolve(step.extra('target'), context), 'target', step))
		strategies = step.extra('mergeStrategy') or {}
		if not isinstance(strategies, Mapping):
			raise FlowDefinitionError(
				f'mergeStrategy must map keys to strategies, got {strategies!r}', step_type=step.type
			)
		default_strategy = step.extra('defaultMergeStrategy', 'overwrite')
		for strategy in [default_strategy, *strategies.values()]:
			if strategy not in MERGE_STRATEGIES:
				raise FlowDefinitionError(f'Unknown merge strategy {strategy!r}', step_type=step.type)

		source = get_path(context, source_path)
		if source is None:
			logger.warning(f'⚠️ Nothing at {source_path!r}, skipping merge')
			return StepResult()

		target = get_path(context, target_path)
		if target is None:
			target = [] if isinstance(source, list) else {}
		merged = merge_values(target, source, strategies, default_strategy)

		target_segments = split_path(target_path)
		if not target_segments:
			raise FlowDefinitionError(f'Invalid merge target {target_path!r}', step_type=step.type)
		root_key = target_segments[0]
		scratch = {root_key: copy.deepcopy(context.get(root_key))}
		set_path(scratch, target_path, merged)
		logger.debug(f'🧩 Merged {source_path} into {target_path}')
		return StepResult(outputs={root_key: scratch[root_key]})
