"""
Logging System for the Symbolic Algebra Core

Verbosity-gated reporting for the rewrite and calculus passes. A caller that
only wants results hears nothing below warnings; raising the level shows how
``simplify`` stopped, then every round it took, then debug detail such as
plateau escapes and derivative requests.
"""

import logging
import sys
import time
from datetime import datetime
from enum import Enum
from typing import List, Optional

LOGGER_NAME = 'symbolic_algebra'


class LogLevel(Enum):
    """Verbosity levels, each including everything below it"""
    SILENT = 0      # Nothing but critical errors
    MINIMAL = 1     # Warnings
    MODERATE = 2    # How each simplify run ended
    DETAILED = 3    # One line per simplify round
    VERBOSE = 4     # Debug detail


class AlgebraLogger:
    """
    Wraps the ``symbolic_algebra`` stdlib logger and decides per message
    whether the configured verbosity wants it.
    """

    def __init__(self, log_level: LogLevel = LogLevel.MINIMAL,
                 log_to_file: bool = False, log_file_path: Optional[str] = None):
        self.log_level = log_level
        self._run_started: Optional[float] = None

        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers.clear()
        for handler in self._build_handlers(log_to_file, log_file_path):
            self.logger.addHandler(handler)

    def _build_handlers(self, log_to_file: bool, log_file_path: Optional[str]) -> List[logging.Handler]:
        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )
        handlers: List[logging.Handler] = []
        if self.log_level != LogLevel.SILENT:
            handlers.append(logging.StreamHandler(sys.stdout))
        if log_to_file:
            if log_file_path is None:
                log_file_path = f"symbolic_algebra_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
            handlers.append(logging.FileHandler(log_file_path))
        for handler in handlers:
            handler.setFormatter(formatter)
        return handlers

    def enabled(self, required_level: LogLevel) -> bool:
        return self.log_level.value >= required_level.value

    def _elapsed_ms(self) -> float:
        if self._run_started is None:
            return 0.0
        return (time.perf_counter() - self._run_started) * 1000.0

    def critical(self, message: str):
        """Logged at every level but SILENT"""
        if self.log_level != LogLevel.SILENT:
            self.logger.error(f"CRITICAL: {message}")

    def info(self, message: str, required_level: LogLevel = LogLevel.MINIMAL):
        if self.enabled(required_level):
            self.logger.info(message)

    def warning(self, message: str):
        if self.enabled(LogLevel.MINIMAL):
            self.logger.warning(message)

    def debug(self, message: str):
        if self.enabled(LogLevel.VERBOSE):
            self.logger.debug(f"DEBUG: {message}")

    def simplify_started(self, rendering: str):
        """Start the clock for one simplify run"""
        self._run_started = time.perf_counter()
        if self.enabled(LogLevel.DETAILED):
            self.logger.info(f"Simplify: {rendering}")

    def simplify_round(self, round_index: int, rendering: str, note: str = ""):
        if not self.enabled(LogLevel.DETAILED):
            return
        message = f"Round {round_index:2d}: {rendering} ({self._elapsed_ms():.2f}ms)"
        if note:
            message += f" {note}"
        self.logger.info(message)

    def simplify_finished(self, reason: str, rounds: int, rendering: str):
        """How the run stopped: converged, single pass, a cycle or the cap"""
        if self.enabled(LogLevel.MODERATE):
            self.logger.info(
                f"Simplify {reason} after {rounds} round(s): {rendering} ({self._elapsed_ms():.2f}ms)"
            )
        self._run_started = None

    def derivative_request(self, rendering: str, variable: str):
        if self.enabled(LogLevel.VERBOSE):
            self.logger.debug(f"DEBUG: d/d{variable} of {rendering}")


# Global logger instance, created on first use
_global_logger: Optional[AlgebraLogger] = None


def get_logger() -> AlgebraLogger:
    global _global_logger
    if _global_logger is None:
        _global_logger = AlgebraLogger()
    return _global_logger


def set_log_level(level: LogLevel):
    """Change the verbosity of the global logger, creating it if needed"""
    global _global_logger
    if _global_logger is None:
        _global_logger = AlgebraLogger(log_level=level)
    else:
        _global_logger.log_level = level


def configure_logging(log_level: LogLevel = LogLevel.MINIMAL,
                      log_to_file: bool = False,
                      log_file_path: Optional[str] = None) -> AlgebraLogger:
    """Replace the global logger; handlers are rebuilt for the new settings"""
    global _global_logger
    _global_logger = AlgebraLogger(
        log_level=log_level,
        log_to_file=log_to_file,
        log_file_path=log_file_path
    )
    return _global_logger


def log_info(message: str, level: LogLevel = LogLevel.MINIMAL):
    get_logger().info(message, level)


def log_debug(message: str):
    get_logger().debug(message)


def log_simplify_started(rendering: str):
    get_logger().simplify_started(rendering)


def log_simplify_round(round_index: int, rendering: str, note: str = ""):
    get_logger().simplify_round(round_index, rendering, note)


def log_simplify_finished(reason: str, rounds: int, rendering: str):
    get_logger().simplify_finished(reason, rounds, rendering)


def log_derivative(rendering: str, variable: str):
    get_logger().derivative_request(rendering, variable)
