"""Timing and size statistics around a single codec call.

The codecs never measure themselves: the CLI wraps the call.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class RunStats:
    read: int
    written: int
    elapsed: float  # seconds

    @property
    def elapsed_ms(self) -> int:
        return int(self.elapsed * 1000)

    @property
    def space_saved(self) -> float:
        """Percent of input size saved, see https://en.wikipedia.org/wiki/Data_compression_ratio"""
        if self.read == 0:
            return 0.0
        return (1.0 - self.written / self.read) * 100.0


def run_with_stats(fn: Callable[[bytes], bytes], data: bytes) -> tuple[bytes, RunStats]:
    t0 = time.perf_counter()
    out = fn(data)
    elapsed = time.perf_counter() - t0
    return out, RunStats(read=len(data), written=len(out), elapsed=elapsed)


def render_stats(stats: RunStats, *, compress: bool) -> str:
    lines = ["done.", f"    in {stats.elapsed_ms} ms"]
    if compress:
        lines.append(f"    saved {stats.space_saved:.2f}%")
    return "\n".join(lines)
