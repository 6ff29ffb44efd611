# src/html_shell/core/utils/run_timers.py
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional


class RunTimers:
    """
    Wall-clock timing for a run, split into named phases
    (e.g. 'collect', 'validate', 'export').
    """

    def __init__(self):
        self._started: Optional[float] = None
        self._finished: Optional[float] = None
        self.phases: Dict[str, float] = {}

    def start(self) -> None:
        self._started = time.perf_counter()
        self._finished = None

    def stop(self) -> None:
        if self._started is not None:
            self._finished = time.perf_counter()

    @contextmanager
    def phase(self, name: str) -> Iterator[None]:
        """Times the enclosed block; repeated phases accumulate."""
        begin = time.perf_counter()
        try:
            yield
        finally:
            self.phases[name] = self.phases.get(name, 0.0) + time.perf_counter() - begin

    @property
    def duration(self) -> float:
        """Seconds since start(); frozen once stop() is called."""
        if self._started is None:
            return 0.0
        end = self._finished if self._finished is not None else time.perf_counter()
        return end - self._started

    def summary(self) -> str:
        parts = [f"{name} {seconds:.2f}s" for name, seconds in self.phases.items()]
        return f"{self.duration:.2f}s" + (f" ({', '.join(parts)})" if parts else "")
