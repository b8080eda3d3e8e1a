"""Colored pipeline logger for deduplication runs.

Each stage of a run gets its own color so a process can be traced through
the terminal output at a glance.

Color scheme:
    Green   - Insertion / Completion
    Blue    - Identification
    Cyan    - Status synchronization
    Yellow  - Data repair
    Magenta - Cleanup
    Red     - Errors
    Gray    - Details / Stats
"""

import logging
import time
from contextlib import contextmanager
from typing import Any

PIPELINE_LOGGER_NAME = "DeduplicationPipeline"


class _Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"


class PipelineStage:
    """Predefined pipeline stages as (label, color, icon)."""

    INSERTION = ("INSERTION", _Colors.GREEN, "+")
    IDENTIFICATION = ("IDENTIFY", _Colors.BLUE, "?")
    SYNC = ("SYNC", _Colors.CYAN, "~")
    REPAIR = ("REPAIR", _Colors.YELLOW, "#")
    CLEANUP = ("CLEANUP", _Colors.MAGENTA, "-")
    PROCESS = ("PROCESS", _Colors.WHITE, "*")
    ERROR = ("ERROR", _Colors.RED, "!")
    COMPLETE = ("COMPLETE", _Colors.GREEN, "=")


def _format_kwargs(kwargs: dict[str, Any]) -> str:
    return " | ".join(f"{k}={v}" for k, v in kwargs.items())


class PipelineLogger:
    """Color-coded logger for deduplication runs.

    Usage:
        log = PipelineLogger()
        log.step_start(PipelineStage.INSERTION, "Registering 12 faces")
        log.detail("Inserted a.jpg", face_id="42")
        log.step_complete(PipelineStage.INSERTION, "12 faces registered")
    """

    def __init__(self, component_name: str = PIPELINE_LOGGER_NAME):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += f" {_Colors.GRAY}({_format_kwargs(kwargs)}){_Colors.RESET}"
        self._logger.info(formatted)

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}done: {message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += f" {_Colors.GRAY}({_format_kwargs(kwargs)}){_Colors.RESET}"
        self._logger.info(formatted)

    def step_error(
        self, stage: tuple[str, str, str], message: str, error: Exception | None = None
    ) -> None:
        label, _, icon = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}-> {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        formatted = f"   {_Colors.GRAY}|- {message}{_Colors.RESET}"
        if kwargs:
            formatted += f" {_Colors.DIM}({_format_kwargs(kwargs)}){_Colors.RESET}"
        self._logger.info(formatted)

    def separator(self, title: str = "") -> None:
        if title:
            self._logger.info(
                f"{_Colors.GRAY}{'-' * 10} {title} {'-' * max(0, 50 - len(title))}{_Colors.RESET}"
            )
        else:
            self._logger.info(f"{_Colors.GRAY}{'-' * 60}{_Colors.RESET}")

    def stats(self, **kwargs: Any) -> None:
        parts = [f"{k}: {v}" for k, v in kwargs.items()]
        self._logger.info(f"   {_Colors.GRAY}{' | '.join(parts)}{_Colors.RESET}")

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Log start and end of a block with its elapsed time. Errors are logged and re-raised."""
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message} failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} ({elapsed:.2f}s)", **kwargs)
