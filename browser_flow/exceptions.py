"""Error taxonomy for navigation flows."""


class NavigationError(Exception):
	"""Base class for every error raised while running a flow.

	``code`` is the stable identifier surfaced as ``FlowResult.error_type``.
	"""

	code = 'NavigationError'

	def __init__(self, message: str, step_type: str | None = None):
		super().__init__(message)
		self.message = message
		self.step_type = step_type


class UnresolvedSelectorError(NavigationError):
	"""A required step field was empty after interpolation."""

	code = 'UnresolvedSelector'


class NavigationTimeoutError(NavigationError):
	"""A wait, a page action or the whole flow exceeded its time limit."""

	code = 'Timeout'


class NoHandlerForStepError(NavigationError):
	"""No registered handler accepts the step type."""

	code = 'NoHandlerForStep'


class ScriptExecutionError(NavigationError):
	"""Page script evaluation raised."""

	code = 'ScriptExecutionError'


class ExternalActionError(NavigationError):
	"""The page surface rejected an action (detached element, navigation error, ...)."""

	code = 'ExternalActionError'


class StepAssertionError(NavigationError):
	"""An ``assert`` step did not hold within its timeout."""

	code = 'AssertionFailed'


class FlowDefinitionError(NavigationError):
	"""The flow definition itself is invalid (bad step, unknown label, ...)."""

	code = 'FlowDefinitionError'
