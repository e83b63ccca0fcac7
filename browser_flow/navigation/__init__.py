from browser_flow.navigation.context import NavigationContext, get_path, resolve, set_path
from browser_flow.navigation.registry import StepHandlerRegistry, create_default_registry
from browser_flow.navigation.service import NavigationEngine, compile_flow
from browser_flow.navigation.templates import load_flow_definition, parse_flow_definition, run_flow_definition
from browser_flow.navigation.views import (
	FlowDefinition,
	FlowResult,
	FlowStatus,
	NavigationOptions,
	NavigationStep,
	StepResult,
)

__all__ = [
	'NavigationEngine',
	'NavigationContext',
	'NavigationOptions',
	'NavigationStep',
	'StepResult',
	'FlowResult',
	'FlowStatus',
	'FlowDefinition',
	'StepHandlerRegistry',
	'create_default_registry',
	'compile_flow',
	'resolve',
	'get_path',
	'set_path',
	'load_flow_definition',
	'parse_flow_definition',
	'run_flow_definition',
]
