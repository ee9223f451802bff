"""Logging utilities for Perimeter."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class GenerationStats:
    """Statistics from a generation run."""

    questions_generated: int = 0
    retries: int = 0
    fallbacks_used: int = 0
    duplicates_accepted: int = 0
    levels: dict[int, int] = field(default_factory=dict)

    @property
    def retry_rate(self) -> float:
        """Average uniqueness retries per generated question."""
        if self.questions_generated:
            return self.retries / self.questions_generated
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("perimeter")
    logger.info("Logging initialized", log_file=str(log_file) if log_file else None, level=file_level)

    return logger


class GenerationLogger:
    """Logger for tracking worksheet generation and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = GenerationStats()

    def log_question(self, shape_key: str, level: int, perimeter: int) -> None:
        """Log a generated question."""
        self._logger.debug("Question generated", shape=shape_key, level=level, perimeter=perimeter)
        self._stats.questions_generated += 1
        self._stats.levels[level] = self._stats.levels.get(level, 0) + 1

    def log_retry(self, shape_key: str, attempt: int) -> None:
        """Log a rejected duplicate."""
        self._logger.debug("Duplicate question rejected", shape=shape_key, attempt=attempt)
        self._stats.retries += 1

    def log_duplicate_accepted(self, shape_key: str, attempts: int) -> None:
        """Log a duplicate accepted after the retry bound."""
        self._logger.debug("Duplicate question accepted", shape=shape_key, attempts=attempts)
        self._stats.duplicates_accepted += 1

    def log_fallback(self, shape_key: str, reason: str) -> None:
        """Log a sampling fallback."""
        self._logger.debug("Sampling fallback used", shape=shape_key, reason=reason)
        self._stats.fallbacks_used += 1

    @property
    def stats(self) -> GenerationStats:
        """Get current generation statistics."""
        return self._stats
