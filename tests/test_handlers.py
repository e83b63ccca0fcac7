"""Tests for the built-in step handlers."""

import pytest

from browser_flow.exceptions import (
	FlowDefinitionError,
	NoHandlerForStepError,
	StepAssertionError,
	UnresolvedSelectorError,
)
from browser_flow.navigation import NavigationStep, create_default_registry
from browser_flow.navigation.handlers.condition import evaluate_expression, is_truthy
from browser_flow.navigation.handlers.merge_context import merge_values
from browser_flow.navigation.handlers.scroll import SCROLL_BY_JS
from tests.conftest import FakeElement, FakePage


def make_step(**data) -> NavigationStep:
	return NavigationStep.model_validate(data)


@pytest.fixture
def registry():
	return create_default_registry()


class TestRegistry:
	def test_first_matching_handler_wins(self, registry):
		class Shadow:
			def can_handle(self, step):
				return step.type == 'click'

			async def execute(self, step, context, page):
				raise AssertionError('never dispatched')

		registry.register(Shadow())
		handler = registry.get_handler(make_step(type='click', selector='#a'))
		assert type(handler).__name__ == 'ClickStepHandler'

	def test_unknown_type_raises(self, registry):
		with pytest.raises(NoHandlerForStepError):
			registry.get_handler(make_step(type='teleport'))

	def test_step_keeps_type_specific_fields(self):
		step = make_step(type='hover', selector='#a', mouseTarget={'x': 1, 'y': 2}, waitFor=100)
		assert step.extra('mouseTarget') == {'x': 1, 'y': 2}
		assert step.wait_for == 100
		derived = step.derive(type='mousemove', waitFor=None)
		assert derived.type == 'mousemove'
		assert derived.wait_for is None
		assert derived.extra('mouseTarget') == {'x': 1, 'y': 2}
		assert step.type == 'hover'


class TestPageActions:
	@pytest.mark.asyncio
	async def test_navigate_resolves_url(self, registry, page):
		await registry.execute(make_step(type='goto', url='https://x.test/{{id}}'), {'id': 5}, page)
		assert page.gotos == [('https://x.test/5', 'load')]

	@pytest.mark.asyncio
	async def test_click(self, registry, page):
		await registry.execute(make_step(type='click', selector='#btn'), {}, page)
		assert page.actions == [('click', '#btn', None)]

	@pytest.mark.asyncio
	async def test_click_with_keyboard_trigger(self, registry, page):
		await registry.execute(make_step(type='click', selector='#btn', triggerType='keyboard'), {}, page)
		assert page.actions == [('focus', '#btn', None), ('press', '#btn', 'Space')]

	@pytest.mark.asyncio
	async def test_click_then_wait_for_pause(self, registry, page):
		await registry.execute(make_step(type='click', selector='#btn', waitFor=300), {}, page)
		assert page.pauses == [300.0]

	@pytest.mark.asyncio
	async def test_input_fills_resolved_value(self, registry, page):
		context = {'user': {'name': 'Ada'}}
		await registry.execute(make_step(type='input', selector='#name', value='{{user.name}}'), context, page)
		assert page.actions == [('fill', '#name', ''), ('fill', '#name', 'Ada')]
		assert page.elements['#name'][0].value == 'Ada'

	@pytest.mark.asyncio
	async def test_input_human_typing(self, registry, page):
		await registry.execute(
			make_step(type='type', selector='#name', value='Ada', humanInput=True, clearInput=False),
			{},
			page,
		)
		assert page.actions == [('type', '#name', 'Ada')]

	@pytest.mark.asyncio
	async def test_select(self, registry, page):
		await registry.execute(make_step(type='select', selector='#country', value='{{code}}'), {'code': 'NL'}, page)
		assert page.elements['#country'][0].value == 'NL'

	@pytest.mark.asyncio
	async def test_press_with_modifiers(self, registry, page):
		await registry.execute(make_step(type='press', key='a', modifiers=['Control']), {}, page)
		assert page.actions == [('key_press', None, 'Control+a')]

	@pytest.mark.asyncio
	async def test_press_down_after_focus(self, registry, page):
		await registry.execute(make_step(type='press', key='Shift', action='down', selector='#name'), {}, page)
		assert page.actions == [('focus', '#name', None), ('key_down', None, 'Shift')]

	@pytest.mark.asyncio
	async def test_unresolved_selector(self, registry, page):
		with pytest.raises(UnresolvedSelectorError):
			await registry.execute(make_step(type='click', selector='{{nothing}}'), {}, page)


class TestWait:
	@pytest.mark.asyncio
	async def test_numeric_value_pauses(self, registry, page):
		await registry.execute(make_step(type='wait', value=250), {}, page)
		assert page.pauses == [250.0]

	@pytest.mark.asyncio
	async def test_templated_numeric_value_pauses(self, registry, page):
		await registry.execute(make_step(type='wait', value='{{delay}}'), {'delay': 40}, page)
		assert page.pauses == [40.0]

	@pytest.mark.asyncio
	async def test_selector_value_waits_for_visibility(self, registry, page):
		await registry.execute(make_step(type='wait', value='h1'), {}, page)
		assert page.pauses == []

	@pytest.mark.asyncio
	async def test_wait_for_load_state(self, registry, page):
		await registry.execute(make_step(type='wait', waitFor='navigation'), {}, page)
		assert page.load_states == ['load']

	@pytest.mark.asyncio
	async def test_defaults_to_network_idle(self, registry, page):
		await registry.execute(make_step(type='wait'), {}, page)
		assert page.load_states == ['networkidle']


class TestMouse:
	@pytest.mark.asyncio
	async def test_hover_delegates_move_then_dwells(self, registry, page):
		await registry.execute(make_step(type='hover', selector='#btn'), {}, page)
		assert page.actions == [('mouse_move', None, (60, 40))]
		assert page.pauses == [500.0]

	@pytest.mark.asyncio
	async def test_hover_duration_split(self, registry, page):
		await registry.execute(make_step(type='hover', selector='#btn', duration=400), {}, page)
		assert page.pauses == [200.0]

	@pytest.mark.asyncio
	async def test_templated_duration(self, registry, page):
		await registry.execute(make_step(type='hover', selector='#btn', duration='{{ms}}'), {'ms': 200}, page)
		assert page.pauses == [100.0]

	@pytest.mark.asyncio
	async def test_drag_delegates_to_mouse(self, registry, page):
		await registry.execute(make_step(type='drag', selector='#btn', target='#target'), {}, page)
		assert page.actions == [
			('mouse_move', None, (60, 40)),
			('mouse_down', None, None),
			('mouse_move', None, (325, 425)),
			('mouse_up', None, None),
		]

	@pytest.mark.asyncio
	async def test_click_with_offset(self, registry, page):
		step = make_step(type='mousemove', action='click', mouseTarget={'selector': '#btn', 'offsetX': 5, 'offsetY': -5})
		await registry.execute(step, {}, page)
		assert page.actions[-1] == ('mouse_click', None, (65, 35))

	@pytest.mark.asyncio
	async def test_wheel_at_coordinates(self, registry, page):
		step = make_step(type='mousemove', action='wheel', mouseTarget={'x': 5, 'y': 6}, delta={'y': 300})
		await registry.execute(step, {}, page)
		assert page.actions == [('mouse_move', None, (5, 6)), ('mouse_wheel', None, (0, 300))]

	@pytest.mark.asyncio
	async def test_fixed_delays_around_action(self, registry, page):
		step = make_step(
			type='mousemove',
			mouseTarget={'x': 1, 'y': 1},
			delayBeforeAction=30,
			delayAfterAction={'min': 10, 'max': 10},
		)
		await registry.execute(step, {}, page)
		assert page.pauses == [30.0, 10.0]

	@pytest.mark.asyncio
	async def test_missing_target_is_a_definition_error(self, registry, page):
		with pytest.raises(FlowDefinitionError):
			await registry.execute(make_step(type='mousemove'), {}, page)


class TestScroll:
	@pytest.mark.asyncio
	async def test_scroll_by_direction(self, registry, page):
		await registry.execute(make_step(type='scroll', direction='up', distance=200), {}, page)
		assert page.scripts == [(SCROLL_BY_JS, [0, -200])]
		assert page.pauses == [500.0]

	@pytest.mark.asyncio
	async def test_scroll_default_distance(self, registry, page):
		await registry.execute(make_step(type='scroll', duration=0), {}, page)
		assert page.scripts == [(SCROLL_BY_JS, [0, 100])]
		assert page.pauses == []

	@pytest.mark.asyncio
	async def test_scroll_element_into_view(self, registry, page):
		await registry.execute(make_step(type='scroll', selector='#btn', scrollMargin=80), {}, page)
		assert page.actions == [('evaluate', '#btn', 80)]


class TestAssert:
	@pytest.mark.asyncio
	async def test_contains_text(self, registry, page):
		await registry.execute(make_step(type='assert', selector='h1', assertionType='containsText', expectedText='Hel'), {}, page)

	@pytest.mark.asyncio
	async def test_attribute_equals(self, registry, page):
		step = make_step(
			type='assert',
			selector='a.link',
			assertionType='attributeEquals',
			attributeName='href',
			expectedValue='/one',
		)
		await registry.execute(step, {}, page)

	@pytest.mark.asyncio
	async def test_is_hidden(self, registry, page):
		await registry.execute(make_step(type='assert', selector='#hidden', assertionType='isHidden'), {}, page)

	@pytest.mark.asyncio
	async def test_failed_assertion(self, registry, page):
		with pytest.raises(StepAssertionError):
			await registry.execute(make_step(type='assert', selector='#none', timeout=150), {}, page)


class TestScript:
	@pytest.mark.asyncio
	async def test_named_script_stores_result(self, registry, page):
		page.script_result = 7
		result = await registry.execute(make_step(type='executeScript', script='1 + 6', name='answer'), {}, page)
		assert result.outputs == {'answer': 7}
		assert page.scripts == [('1 + 6', None)]

	@pytest.mark.asyncio
	async def test_script_is_interpolated(self, registry, page):
		await registry.execute(make_step(type='executeScript', script='window.go({{n}})'), {'n': 3}, page)
		assert page.scripts == [('window.go(3)', None)]


class TestCondition:
	@pytest.mark.parametrize(
		'expression,expected',
		[
			('3 > 0', True),
			(' > 0', False),
			('2 < 10', True),
			('10 >= 10', True),
			('abc == abc', True),
			("'x' != ''", True),
			('1.0 == 1', True),
			('', False),
			('true', True),
			('0', False),
			('undefined', False),
		],
	)
	def test_evaluate_expression(self, expression, expected):
		assert evaluate_expression(expression) is expected

	def test_truthiness(self):
		assert is_truthy('yes')
		assert not is_truthy('False')
		assert not is_truthy(0)
		assert is_truthy([1])

	@pytest.mark.asyncio
	async def test_selector_condition_runs_then_branch(self, registry, page):
		step = make_step(
			type='condition',
			condition='#btn',
			name='hasButton',
			thenSteps=[{'type': 'extract', 'selector': 'h1', 'name': 'title'}],
			elseSteps=[{'type': 'extract', 'selector': '#name', 'name': 'other'}],
		)
		context = {}
		result = await registry.execute(step, context, page)
		assert result.outputs == {'hasButton': True, 'title': 'Hello'}
		assert result.jump_to is None
		assert context == {'title': 'Hello'}

	@pytest.mark.asyncio
	async def test_missing_selector_runs_else_branch(self, registry, page):
		step = make_step(
			type='condition',
			condition='#absent',
			thenSteps=[{'type': 'click', 'selector': '#btn'}],
			elseSteps=[{'type': 'executeScript', 'script': 'x()', 'name': 'ran'}],
		)
		result = await registry.execute(step, {}, page)
		assert result.outputs == {'ran': None}
		assert page.actions == []

	@pytest.mark.asyncio
	async def test_callable_condition(self, registry, page):
		step = NavigationStep(type='condition', condition=lambda ctx, p: ctx['n'] > 1, jump_to='done')
		result = await registry.execute(step, {'n': 2}, page)
		assert result.jump_to == 'done'

	@pytest.mark.asyncio
	async def test_callable_that_raises_is_false(self, registry, page):
		def broken(ctx, p):
			raise RuntimeError('nope')

		result = await registry.execute(NavigationStep(type='condition', condition=broken, jump_to=3), {}, page)
		assert result.jump_to is None

	@pytest.mark.asyncio
	async def test_script_condition(self, registry, page):
		page.script_result = True
		step = make_step(type='condition', condition='document.title === "{{title}}"', conditionType='script', jumpTo=4)
		result = await registry.execute(step, {'title': 'Home'}, page)
		assert result.jump_to == 4
		assert page.scripts == [('document.title === "Home"', None)]

	@pytest.mark.asyncio
	async def test_jumps_inside_branches_are_ignored(self, registry, page):
		step = make_step(type='condition', condition='#btn', thenSteps=[{'type': 'jump', 'jumpTo': 0}])
		result = await registry.execute(step, {}, page)
		assert result.jump_to is None


class TestPaginate:
	@pytest.mark.asyncio
	async def test_follows_next_until_it_disappears(self, registry):
		page = FakePage({'.item': [FakeElement(text='a'), FakeElement(text='b')]})

		def load_next_page():
			page.elements['.item'] = [FakeElement(text='c')]
			del page.elements['li.next a']

		page.elements['li.next a'] = [FakeElement(text='Next', on_click=load_next_page)]
		step = make_step(
			type='paginate',
			selector='li.next a',
			maxPages=5,
			name='pages',
			extractSteps=[{'type': 'extract', 'selector': '.item', 'mode': 'list', 'name': 'items'}],
		)
		context = {}
		result = await registry.execute(step, context, page)

		assert result.outputs['pages'] == [{'items': ['a', 'b']}, {'items': ['c']}]
		assert context['items'] == ['c']
		assert page.load_states == ['networkidle']

	@pytest.mark.asyncio
	async def test_disabled_next_button_stops(self, registry):
		page = FakePage(
			{
				'.item': [FakeElement(text='a')],
				'.next': [FakeElement(text='Next', attrs={'disabled': ''})],
			}
		)
		step = make_step(
			type='paginate',
			selector='.next',
			maxPages=3,
			name='pages',
			extractSteps=[{'type': 'extract', 'selector': '.item', 'mode': 'list', 'name': 'items'}],
		)
		result = await registry.execute(step, {}, page)
		assert result.outputs['pages'] == [{'items': ['a']}]
		assert page.actions == []


class TestMergeContext:
	@pytest.mark.asyncio
	async def test_merge_with_per_key_strategy(self, registry, page):
		context = {'all': {'items': [1, 2], 'title': 'old'}, 'batch': {'items': [2, 3], 'title': 'new'}}
		step = make_step(type='mergeContext', source='batch', target='all', mergeStrategy={'items': 'union'})
		result = await registry.execute(step, context, page)
		assert result.outputs == {'all': {'items': [1, 2, 3], 'title': 'new'}}
		assert context['all'] == {'items': [1, 2], 'title': 'old'}

	@pytest.mark.asyncio
	async def test_merge_into_nested_missing_target(self, registry, page):
		context = {'rows': [1, 2]}
		step = make_step(type='mergeContext', source='rows', target='report.rows', defaultMergeStrategy='append')
		result = await registry.execute(step, context, page)
		assert result.outputs == {'report': {'rows': [1, 2]}}

	@pytest.mark.parametrize('target', ['trendsData.trends.{{index}}', 'trendsData.trends[{{index}}]'])
	@pytest.mark.asyncio
	async def test_merge_into_list_entry(self, registry, page, target):
		context = {
			'trendsData': {'trends': [{'t': 'a'}, {'t': 'b'}]},
			'panelData': {'news': 'n'},
			'currentIndex': 1,
		}
		step = make_step(type='mergeContext', source='panelData', target=target)
		result = await registry.execute(step, context, page)
		assert result.outputs == {'trendsData': {'trends': [{'t': 'a'}, {'t': 'b', 'news': 'n'}]}}
		assert context['trendsData'] == {'trends': [{'t': 'a'}, {'t': 'b'}]}

	@pytest.mark.asyncio
	async def test_merge_strategy_must_be_a_mapping(self, registry, page):
		context = {'a': [1], 'b': [2]}
		step = make_step(type='mergeContext', source='a', target='b', mergeStrategy='append')
		with pytest.raises(FlowDefinitionError):
			await registry.execute(step, context, page)

	@pytest.mark.asyncio
	async def test_missing_source_is_skipped(self, registry, page):
		result = await registry.execute(make_step(type='mergeContext', source='nope', target='x'), {}, page)
		assert result.outputs == {}

	def test_merge_strategies(self):
		assert merge_values({'a': [1]}, {'a': 2}, {'a': 'append'}, 'overwrite') == {'a': [1, 2]}
		assert merge_values({'a': 1}, {'a': 2}, {}, 'ignore') == {'a': 1}
		assert merge_values('x', 'y', {}, 'append') == ['x', 'y']
