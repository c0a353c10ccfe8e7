"""Debug console setup for CLI"""

from rich.console import Console

from settings import DEBUG_LOG_FILE
from utils.debug_console import create_debug_console, setup_debug_logging


def setup_debug_console(debug: bool, domain: str, log_file: str = DEBUG_LOG_FILE) -> Console:
    """
    Setup console and logging based on debug mode

    Args:
        debug: Whether debug mode is enabled
        domain: Domain being authenticated against (logged at session start)
        log_file: Debug log file

    Returns:
        Console instance (either regular or debug-enabled)
    """
    if not debug:
        return Console()

    debug_logger = setup_debug_logging(log_file)
    console = create_debug_console(debug_enabled=True, debug_logger=debug_logger)
    debug_logger.debug("[CLI] ===== CLI SESSION STARTED =====")
    debug_logger.debug(f"[CLI] Domain: {domain}")
    return console
