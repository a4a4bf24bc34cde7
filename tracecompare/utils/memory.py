"""
Process resource reporting.

Wall time and memory of the current run, logged at the end of a verbose
comparison.
"""

import logging
import time

import psutil

logger = logging.getLogger(__name__)


def get_memory_usage_mb() -> float:
    """Resident memory of the current process in MB."""
    return psutil.Process().memory_info().rss / 1e6


def get_virtual_memory_mb() -> float:
    """Virtual memory of the current process in MB."""
    return psutil.Process().memory_info().vms / 1e6


class RunTimer:
    """Wall clock started at construction."""

    def __init__(self):
        self.started = time.time()

    @property
    def elapsed(self) -> float:
        return time.time() - self.started

    def log_usage(self, label: str = "Run") -> None:
        logger.info(
            f"{label}: {self.elapsed:.2f}s wall time, "
            f"{get_memory_usage_mb():.1f} MB resident, "
            f"{get_virtual_memory_mb():.1f} MB virtual"
        )
