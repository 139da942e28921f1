"""
Logging setup for the API process
"""
import logging

_LOGGING_CONFIGURED = False


def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging once; later calls are ignored
    """
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s - %(message)s",
    )
    _LOGGING_CONFIGURED = True
