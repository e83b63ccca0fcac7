from browser_flow.navigation.handlers.assertion import AssertStepHandler
from browser_flow.navigation.handlers.base import StepHandler
from browser_flow.navigation.handlers.click import ClickStepHandler
from browser_flow.navigation.handlers.condition import ConditionStepHandler
from browser_flow.navigation.handlers.drag import DragStepHandler
from browser_flow.navigation.handlers.extract import ExtractStepHandler
from browser_flow.navigation.handlers.hover import HoverStepHandler
from browser_flow.navigation.handlers.input import InputStepHandler
from browser_flow.navigation.handlers.jump import JumpStepHandler
from browser_flow.navigation.handlers.merge_context import MergeContextStepHandler
from browser_flow.navigation.handlers.mouse import MouseStepHandler
from browser_flow.navigation.handlers.navigate import NavigateStepHandler
from browser_flow.navigation.handlers.paginate import PaginateStepHandler
from browser_flow.navigation.handlers.press import PressStepHandler
from browser_flow.navigation.handlers.script import ScriptStepHandler
from browser_flow.navigation.handlers.scroll import ScrollStepHandler
from browser_flow.navigation.handlers.select import SelectStepHandler
from browser_flow.navigation.handlers.wait import WaitStepHandler

__all__ = [
	'StepHandler',
	'NavigateStepHandler',
	'JumpStepHandler',
	'ClickStepHandler',
	'InputStepHandler',
	'SelectStepHandler',
	'WaitStepHandler',
	'ExtractStepHandler',
	'ConditionStepHandler',
	'ScrollStepHandler',
	'MouseStepHandler',
	'HoverStepHandler',
	'DragStepHandler',
	'PressStepHandler',
	'ScriptStepHandler',
	'AssertStepHandler',
	'PaginateStepHandler',
	'MergeContextStepHandler',
]
