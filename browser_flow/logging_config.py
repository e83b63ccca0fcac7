"""Logging setup for the browser_flow package."""

import logging
import sys

from browser_flow.config import get_config

LOG_FORMAT = '%(levelname)-8s [%(name)s] %(message)s'


def setup_logging(level: str | None = None) -> logging.Logger:
	"""Attach a stdout handler to the ``browser_flow`` logger.

	Args:
		level: Level name (debug, info, warning, error). Defaults to ``BROWSER_FLOW_LOGGING_LEVEL``.

	Returns:
		The configured package logger
	"""
	level_name = (level or get_config().logging_level).upper()
	log_level = getattr(logging, level_name, logging.INFO)

	package_logger = logging.getLogger('browser_flow')
	package_logger.setLevel(log_level)

	# Calling setup twice must not duplicate output
	if not any(getattr(h, '_browser_flow', False) for h in package_logger.handlers):
		handler = logging.StreamHandler(sys.stdout)
		handler.setFormatter(logging.Formatter(LOG_FORMAT))
		handler._browser_flow = True  # type: ignore[attr-defined]
		package_logger.addHandler(handler)
	package_logger.propagate = False

	# Third-party loggers are noisy at debug level
	for third_party in ('asyncio', 'httpx', 'httpcore'):
		logging.getLogger(third_party).setLevel(logging.WARNING)

	return package_logger
