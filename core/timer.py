"""Phase timing for the solve pipeline."""

import time
from typing import Dict, List, Tuple


class PhaseTimer:
    """Records elapsed microseconds between named checkpoints."""

    def __init__(self):
        self._start = None
        self._last = None
        self._segments: List[Tuple[str, int]] = []

    def __len__(self):
        return len(self._segments)

    def start(self) -> None:
        self._start = time.perf_counter()
        self._last = self._start
        self._segments = []

    def save(self, name: str) -> int:
        """Close the current segment under `name` and return its duration (us)."""
        if self._start is None:
            raise RuntimeError("Timer not started")
        now = time.perf_counter()
        elapsed = int((now - self._last) * 1_000_000)
        self._segments.append((name, elapsed))
        self._last = now
        return elapsed

    def end(self) -> Dict[str, int]:
        """Return every saved segment plus a 'total' entry, in microseconds."""
        if self._start is None:
            raise RuntimeError("Timer not started")
        results = {'total': int((time.perf_counter() - self._start) * 1_000_000)}
        for name, elapsed in self._segments:
            results[name] = elapsed
        return results
