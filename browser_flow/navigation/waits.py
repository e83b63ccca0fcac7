"""Shared wait strategy used by step handlers."""

import asyncio
import logging
import random
from typing import TYPE_CHECKING, Any

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from browser_flow.exceptions import NavigationTimeoutError
from browser_flow.navigation.context import NavigationContext, resolve

if TYPE_CHECKING:
	from playwright.async_api import Page as PlaywrightPage

	from browser_flow.navigation.views import NavigationStep

logger = logging.getLogger(__name__)

DEFAULT_STEP_TIMEOUT_MS = 30000

# waitFor sentinels mapped to Playwright load states
LOAD_STATES = {
	'load': 'load',
	'navigation': 'load',
	'domcontentloaded': 'domcontentloaded',
	'networkidle': 'networkidle',
}


def step_timeout(step: 'NavigationStep', context: NavigationContext, default: int = DEFAULT_STEP_TIMEOUT_MS) -> int:
	"""Timeout in ms for waits embedded in ``step``, resolved against ``context``."""
	timeout = as_number(resolve(step.timeout, context))
	if timeout is None or timeout < 0:
		return default
	return int(timeout)


def as_number(value: Any) -> float | None:
	"""Interpret a resolved field as a number of milliseconds, if it is one."""
	if isinstance(value, bool):
		return None
	if isinstance(value, (int, float)):
		return float(value)
	if isinstance(value, str):
		try:
			return float(value.strip())
		except ValueError:
			return None
	return None


async def pause(page: 'PlaywrightPage', ms: float) -> None:
	if ms <= 0:
		return
	await page.wait_for_timeout(ms)


async def human_pause(page: 'PlaywrightPage', ms: float, jitter: float = 0.2) -> None:
	"""Pause for ``ms`` randomised by +/- ``jitter``."""
	await pause(page, ms * random.uniform(1 - jitter, 1 + jitter))


async def wait_for_selector(page: 'PlaywrightPage', selector: str, timeout: int, state: str = 'visible') -> None:
	try:
		await page.wait_for_selector(selector, state=state, timeout=timeout)
	except PlaywrightTimeoutError as e:
		raise NavigationTimeoutError(f'Timed out after {timeout}ms waiting for {selector!r} to be {state}') from e


async def wait_for_load_state(page: 'PlaywrightPage', state: str, timeout: int) -> None:
	try:
		await page.wait_for_load_state(state, timeout=timeout)
	except PlaywrightTimeoutError as e:
		raise NavigationTimeoutError(f'Timed out after {timeout}ms waiting for load state {state!r}') from e


async def handle_wait_for(
	page: 'PlaywrightPage',
	wait_for: Any,
	context: NavigationContext,
	timeout: int = DEFAULT_STEP_TIMEOUT_MS,
) -> None:
	"""Apply a ``waitFor`` value.

	Args:
		page: Page to wait on
		wait_for: Number of ms to pause, a load-state sentinel or a selector
		context: Context used to resolve a templated value
		timeout: Upper bound for load-state and selector waits
	"""
	value = resolve(wait_for, context)
	if value is None or value == '':
		return

	if isinstance(value, str) and value.strip().lower() in LOAD_STATES:
		state = LOAD_STATES[value.strip().lower()]
		logger.debug(f'⏳ Waiting for load state {state}')
		await wait_for_load_state(page, state, timeout)
		return

	ms = as_number(value)
	if ms is not None:
		logger.debug(f'⏳ Pausing {ms:.0f}ms')
		await pause(page, ms)
		return

	if isinstance(value, str):
		logger.debug(f'⏳ Waiting for {value} to be visible')
		await wait_for_selector(page, value, timeout)
		return

	logger.warning(f'⚠️ Ignoring unsupported waitFor value: {value!r}')


async def poll_until(check, timeout_ms: int, interval_ms: int = 100) -> bool:
	"""Await ``check()`` every ``interval_ms`` until it is truthy or time runs out."""
	loop = asyncio.get_running_loop()
	deadline = loop.time() + timeout_ms / 1000
	while True:
		if await check():
			return True
		if loop.time() >= deadline:
			return False
		await asyncio.sleep(interval_ms / 1000)
