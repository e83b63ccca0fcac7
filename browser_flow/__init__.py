from browser_flow.config import EngineConfig, get_config
from browser_flow.exceptions import (
	ExternalActionError,
	FlowDefinitionError,
	NavigationError,
	NavigationTimeoutError,
	NoHandlerForStepError,
	ScriptExecutionError,
	StepAssertionError,
	UnresolvedSelectorError,
)
from browser_flow.extraction import ExtractionEngine, SelectorConfig
from browser_flow.logging_config import setup_logging
from browser_flow.navigation import (
	FlowResult,
	FlowStatus,
	NavigationEngine,
	NavigationOptions,
	NavigationStep,
	StepHandlerRegistry,
	StepResult,
	create_default_registry,
	load_flow_definition,
	resolve,
	run_flow_definition,
)

__all__ = [
	'NavigationEngine',
	'NavigationOptions',
	'NavigationStep',
	'StepResult',
	'FlowResult',
	'FlowStatus',
	'StepHandlerRegistry',
	'create_default_registry',
	'ExtractionEngine',
	'SelectorConfig',
	'resolve',
	'load_flow_definition',
	'run_flow_definition',
	'EngineConfig',
	'get_config',
	'setup_logging',
	'NavigationError',
	'UnresolvedSelectorError',
	'NavigationTimeoutError',
	'NoHandlerForStepError',
	'ScriptExecutionError',
	'ExternalActionError',
	'StepAssertionError',
	'FlowDefinitionError',
]
