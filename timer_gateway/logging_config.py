"""Logging setup based on loguru.

Modules log through ``logger.bind(module=...)``; this installs the single
console sink that shows the bound module name.
"""
import sys

from loguru import logger

FORMAT_CONSOLE = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[module]: <18}</cyan> | "
    "<level>{message}</level>"
)

_configured = False


def setup_logging(level: str = "INFO", force: bool = False) -> None:
    """Replace loguru's default sink with the gateway's console format.

    Args:
        level: Minimum level (TRACE/DEBUG/INFO/WARNING/ERROR/CRITICAL)
        force: Reconfigure even if already set up
    """
    global _configured
    if _configured and not force:
        return

    logger.remove()
    logger.configure(extra={"module": "main"})
    logger.add(
        sys.stderr,
        format=FORMAT_CONSOLE,
        level=level.upper(),
        colorize=True,
    )
    _configured = True
