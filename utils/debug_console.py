"""Debug console module for capturing Rich console output to log files.

When --debug is given, everything printed to the terminal is mirrored as
plain text into the debug log next to the module loggers' records.
"""

import io
import logging
import os
import re
from typing import Optional

from rich.console import Console as RichConsole

from settings import DEBUG_LOG_FILE

# ANSI escape sequence pattern
ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')


class DebugCapturingConsole(RichConsole):
    """
    Rich Console that mirrors printed output into a debug logger.

    Terminal output keeps its styling; the logger receives the same text
    rendered without markup, one record per print() call.
    """

    def __init__(self, debug_logger: Optional[logging.Logger] = None, *args,
                 log_prefix: str = "[CONSOLE] ", **kwargs):
        """
        Args:
            debug_logger: Logger receiving the captured text
            log_prefix: Prefix marking console records in the log
            *args, **kwargs: Passed through to Rich Console
        """
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger
        self.log_prefix = log_prefix

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        if not self.debug_logger or not self.debug_logger.isEnabledFor(logging.DEBUG):
            return
        text = self.render_plain(*objects, **kwargs)
        if text.strip():
            self.debug_logger.debug(f"{self.log_prefix}{text}")

    def render_plain(self, *objects, **kwargs) -> str:
        """Render objects the way print() would, minus styling"""
        buffer = io.StringIO()
        plain_console = RichConsole(
            file=buffer,
            force_terminal=False,
            no_color=True,
            width=self.width,
            legacy_windows=False,
        )
        plain_console.print(*objects, **kwargs)
        return ANSI_ESCAPE.sub('', buffer.getvalue()).rstrip()


def create_debug_console(debug_enabled: bool = False,
                        debug_logger: Optional[logging.Logger] = None) -> RichConsole:
    """
    Create appropriate console instance based on debug mode.

    Args:
        debug_enabled: Whether debug mode is enabled
        debug_logger: Logger instance for debug output

    Returns:
        DebugCapturingConsole if debug enabled, regular Console otherwise
    """
    if debug_enabled and debug_logger:
        return DebugCapturingConsole(debug_logger=debug_logger)
    return RichConsole()


def setup_debug_logger(log_file: str = DEBUG_LOG_FILE) -> logging.Logger:
    """
    Set up a dedicated logger for captured console output.

    Args:
        log_file: Path to debug log file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("debug_console")
    logger.setLevel(logging.DEBUG)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    logger.addHandler(file_handler)

    # Console lines already reach the terminal through Rich
    logger.propagate = False

    return logger


def setup_debug_logging(log_file: str = DEBUG_LOG_FILE) -> logging.Logger:
    """
    Route all module loggers to the debug log file and stderr.

    Args:
        log_file: Path to debug log file (appended to)

    Returns:
        Logger for captured console output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_path = os.path.abspath(log_file)
    file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # Outbound HTTP libraries are chatty at DEBUG and may echo headers
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.INFO)

    debug_logger = setup_debug_logger(log_path)
    logging.getLogger(__name__).info(f"Debug logging enabled - appending to {log_path}")
    return debug_logger
