"""structlog configuration for the command-line interface."""

import logging

import structlog


def configure_logging(verbose: bool = False) -> None:
    """Route structlog events through the stdlib "makepick" logger.

    Without verbose, only warnings and errors are emitted (via logging's
    last-resort stderr handler). With verbose, debug events are printed too.

    Args:
        verbose: Emit debug events.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    package_logger = logging.getLogger("makepick")
    package_logger.setLevel(level)
    # Rebind on every call; stderr may have been swapped since the last one
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    if verbose:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
