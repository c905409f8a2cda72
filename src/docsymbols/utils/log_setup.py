"""
Logging setup for hosts embedding docsymbols.

Only the ``docsymbols`` package logger is touched, so an editor host keeps
full control of the root logger and its own handlers.

"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "docsymbols"

# Marks handlers installed here, so a repeated setup replaces them and nothing else
_OWNED_ATTR = "_docsymbols_owned"

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"

console = Console(stderr=True)


def _install(package_logger: logging.Logger, handler: logging.Handler) -> None:
	setattr(handler, _OWNED_ATTR, True)
	package_logger.addHandler(handler)


def _remove_owned_handlers(package_logger: logging.Logger) -> None:
	for handler in package_logger.handlers[:]:
		if getattr(handler, _OWNED_ATTR, False):
			package_logger.removeHandler(handler)
			handler.close()


def setup_logging(
	is_verbose: bool = False,
	log_to_console: bool = True,
	log_file_path: Path | str | None = None,
	propagate: bool = False,
) -> logging.Logger:
	"""
	Route docsymbols log records to a rich console handler and an optional file.

	Args:
	    is_verbose: Log debug records (fetch scheduling, cancellations) instead of warnings only.
	    log_to_console: Attach a RichHandler writing to stderr.
	    log_file_path: Append every record, debug included, to this file.
	    propagate: Also pass records on to the host's root handlers.

	Returns:
	    The configured ``docsymbols`` logger.

	"""
	package_logger = logging.getLogger(PACKAGE_LOGGER)
	_remove_owned_handlers(package_logger)
	package_logger.propagate = propagate

	console_level = logging.DEBUG if is_verbose else logging.WARNING
	package_logger.setLevel(logging.DEBUG if is_verbose or log_file_path else logging.WARNING)

	if log_to_console:
		_install(
			package_logger,
			RichHandler(
				console=console,
				level=console_level,
				rich_tracebacks=True,
				show_time=True,
				show_path=is_verbose,
			),
		)

	if log_file_path:
		file_path = Path(log_file_path)
		try:
			file_path.parent.mkdir(parents=True, exist_ok=True)
			file_handler = logging.FileHandler(file_path, mode="a", encoding="utf-8")
		except OSError:
			package_logger.exception("Cannot write docsymbols log file %s", file_path)
		else:
			file_handler.setLevel(logging.DEBUG)
			file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
			_install(package_logger, file_handler)
			package_logger.debug("Logging to file: %s", file_path)

	return package_logger
