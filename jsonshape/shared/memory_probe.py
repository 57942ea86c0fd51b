import logging
import time
import tracemalloc
from typing import NamedTuple

import psutil

from jsonshape.errors import TelemetryFailure

logger = logging.getLogger(__name__)


class MemorySample(NamedTuple):
    allocated: int
    resident: int

    def __str__(self):
        return f"{self.allocated} bytes allocated/{self.resident} bytes resident"


class MemoryProbe:
    """Sample traced Python allocations and process resident memory."""

    def __init__(self, settle_seconds=1.0):
        self.settle_seconds = settle_seconds
        self.available = False
        self._started_tracing = False

        try:
            self._process = psutil.Process()
            self.available = True
        except psutil.Error:
            logger.warning("psutil cannot inspect this process. Memory telemetry disabled.")
            self._process = None

        if self.available and not tracemalloc.is_tracing():
            tracemalloc.start()
            self._started_tracing = True
            logger.info("tracemalloc started for allocation sampling")

    @property
    def tracing(self) -> bool:
        """True while tracemalloc is recording, which slows every allocation."""
        return tracemalloc.is_tracing()

    def sample(self) -> MemorySample:
        """Wait for the settle delay, then read allocated and resident bytes."""
        if not self.available:
            raise TelemetryFailure("memory telemetry is not available")

        time.sleep(self.settle_seconds)
        try:
            allocated, _peak = tracemalloc.get_traced_memory()
            resident = self._process.memory_info().rss
        except psutil.Error as e:
            logger.error(f"Error reading process memory: {e}")
            raise TelemetryFailure(f"cannot sample process memory: {e}") from e
        return MemorySample(allocated, resident)

    def close(self):
        """Stop tracemalloc if this probe started it."""
        if self._started_tracing:
            tracemalloc.stop()
            self._started_tracing = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
