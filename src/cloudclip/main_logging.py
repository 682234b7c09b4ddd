"""Logging configuration for the cloudclip CLI."""
import logging


def configure_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity setting.

    Args:
        verbose: If True, set DEBUG level; otherwise WARNING level.

    Warnings and errors (store failures, missing credentials) are always
    printed to stderr regardless of verbosity.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )
    # Keep the store client's per-request logging out of debug output
    logging.getLogger("httpx").setLevel(logging.WARNING)
