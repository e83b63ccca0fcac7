"""In-memory stand-ins for the Playwright page surface used by the tests."""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


@dataclass
class FakeElement:
	text: str = ''
	attrs: Dict[str, str] = field(default_factory=dict)
	html: Optional[str] = None
	visible: bool = True
	box: Dict[str, float] = field(default_factory=lambda: {'x': 0, 'y': 0, 'width': 100, 'height': 20})
	children: Dict[str, List['FakeElement']] = field(default_factory=dict)
	on_click: Optional[Callable[[], None]] = None
	value: Optional[str] = None
	evaluate_result: Any = None

	@property
	def inner_html(self) -> str:
		return self.html if self.html is not None else self.text


class FakeLocator:
	def __init__(self, page: 'FakePage', selector: str, resolver: Callable[[], List[FakeElement]]):
		self.page = page
		self.selector = selector
		self._resolver = resolver

	def _elements(self) -> List[FakeElement]:
		return self._resolver()

	def _single(self) -> FakeElement:
		elements = self._elements()
		if not elements:
			raise PlaywrightTimeoutError(f'Timeout exceeded waiting for {self.selector}')
		return elements[0]

	def _record(self, action: str, value: Any = None) -> None:
		self.page.actions.append((action, self.selector, value))

	@property
	def first(self) -> 'FakeLocator':
		return self.nth(0)

	def nth(self, index: int) -> 'FakeLocator':
		return FakeLocator(self.page, self.selector, lambda: self._elements()[index:index + 1])

	def locator(self, selector: str) -> 'FakeLocator':
		return FakeLocator(
			self.page,
			f'{self.selector} {selector}',
			lambda: [child for element in self._elements() for child in element.children.get(selector, [])],
		)

	async def count(self) -> int:
		return len(self._elements())

	async def wait_for(self, state: str = 'visible', timeout: float = 30000) -> None:
		elements = self._elements()
		if state == 'visible' and any(e.visible for e in elements):
			return
		if state == 'attached' and elements:
			return
		await asyncio.sleep(timeout / 1000)
		raise PlaywrightTimeoutError(f'Timeout {timeout}ms exceeded waiting for {self.selector}')

	async def click(self, timeout: float = None, click_count: int = 1) -> None:
		element = self._single()
		self._record('click')
		if element.on_click:
			element.on_click()

	async def fill(self, value: str, timeout: float = None) -> None:
		self._single().value = value
		self._record('fill', value)

	async def press_sequentially(self, text: str, delay: float = 0, timeout: float = None) -> None:
		element = self._single()
		element.value = (element.value or '') + text
		self._record('type', text)

	async def select_option(self, value: Any, timeout: float = None) -> None:
		self._single().value = value
		self._record('select', value)

	async def focus(self, timeout: float = None) -> None:
		self._single()
		self._record('focus')

	async def press(self, key: str, timeout: float = None) -> None:
		self._single()
		self._record('press', key)

	async def text_content(self, timeout: float = None) -> Optional[str]:
		return self._single().text

	async def inner_text(self, timeout: float = None) -> str:
		return self._single().text

	async def inner_html(self, timeout: float = None) -> str:
		return self._single().inner_html

	async def get_attribute(self, name: str, timeout: float = None) -> Optional[str]:
		return self._single().attrs.get(name)

	async def all_text_contents(self) -> List[str]:
		return [e.text for e in self._elements()]

	async def bounding_box(self, timeout: float = None) -> Optional[Dict[str, float]]:
		return self._single().box

	async def is_visible(self) -> bool:
		elements = self._elements()
		return bool(elements) and elements[0].visible

	async def is_hidden(self) -> bool:
		return not await self.is_visible()

	async def evaluate(self, expression: str, arg: Any = None) -> Any:
		element = self._single()
		self._record('evaluate', arg)
		return element.evaluate_result


class FakeKeyboard:
	def __init__(self, page: 'FakePage'):
		self.page = page

	async def press(self, key: str, delay: float = 0) -> None:
		self.page.actions.append(('key_press', None, key))

	async def down(self, key: str) -> None:
		self.page.actions.append(('key_down', None, key))

	async def up(self, key: str) -> None:
		self.page.actions.append(('key_up', None, key))


class FakeMouse:
	def __init__(self, page: 'FakePage'):
		self.page = page

	async def move(self, x: float, y: float, steps: int = 1) -> None:
		self.page.actions.append(('mouse_move', None, (x, y)))

	async def down(self, button: str = 'left') -> None:
		self.page.actions.append(('mouse_down', None, None))

	async def up(self, button: str = 'left') -> None:
		self.page.actions.append(('mouse_up', None, None))

	async def click(self, x: float, y: float, button: str = 'left') -> None:
		self.page.actions.append(('mouse_click', None, (x, y)))

	async def wheel(self, delta_x: float, delta_y: float) -> None:
		self.page.actions.append(('mouse_wheel', None, (delta_x, delta_y)))


class FakePage:
	"""Selector -> elements table with Playwright-shaped async methods."""

	def __init__(self, elements: Optional[Dict[str, List[FakeElement]]] = None, html: str = '', body_text: str = ''):
		self.elements: Dict[str, List[FakeElement]] = elements or {}
		self.html = html
		self.body_text = body_text
		self.url = 'about:blank'
		self.actions: List[tuple] = []
		self.gotos: List[tuple] = []
		self.pauses: List[float] = []
		self.load_states: List[str] = []
		self.scripts: List[tuple] = []
		self.screenshots: List[str] = []
		self.script_result: Any = None
		self.script_error: Optional[str] = None
		self.networkidle_times_out = False
		self.keyboard = FakeKeyboard(self)
		self.mouse = FakeMouse(self)

	def locator(self, selector: str) -> FakeLocator:
		return FakeLocator(self, selector, lambda: self.elements.get(selector, []))

	async def goto(self, url: str, wait_until: str = 'load', timeout: float = None, **kwargs) -> None:
		self.gotos.append((url, wait_until))
		if wait_until == 'networkidle' and self.networkidle_times_out:
			raise PlaywrightTimeoutError(f'Timeout {timeout}ms exceeded waiting for networkidle')
		self.url = url

	async def wait_for_selector(self, selector: str, state: str = 'visible', timeout: float = 30000) -> None:
		await self.locator(selector).wait_for(state=state, timeout=timeout)

	async def wait_for_timeout(self, timeout: float) -> None:
		self.pauses.append(timeout)
		await asyncio.sleep(0)

	async def wait_for_load_state(self, state: str = 'load', timeout: float = None) -> None:
		self.load_states.append(state)

	async def evaluate(self, expression: str, arg: Any = None) -> Any:
		self.scripts.append((expression, arg))
		if self.script_error:
			raise PlaywrightError(self.script_error)
		return self.script_result

	async def content(self) -> str:
		return self.html

	async def inner_text(self, selector: str) -> str:
		return self.body_text

	async def screenshot(self, path: str = None, full_page: bool = False) -> bytes:
		self.screenshots.append(path)
		return b''


@pytest.fixture
def page() -> FakePage:
	return FakePage(
		{
			'h1': [FakeElement(text='Hello')],
			'#btn': [FakeElement(text='Go', box={'x': 10, 'y': 20, 'width': 100, 'height': 40})],
			'#target': [FakeElement(text='Drop', box={'x': 300, 'y': 400, 'width': 50, 'height': 50})],
			'#name': [FakeElement()],
			'#country': [FakeElement()],
			'a.link': [
				FakeElement(text=' First ', attrs={'href': '/one'}),
				FakeElement(text='Second', attrs={'href': '/two'}),
			],
			'#hidden': [FakeElement(text='secret', visible=False)],
		}
	)
