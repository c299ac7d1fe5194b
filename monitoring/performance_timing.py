# ABOUTME: Phase timing for artifact generation (sitemap, feeds, robots, reports)
# ABOUTME: Context manager records durations and per-phase details; summary renders as a rich table

import time
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from utils.console_output import console, print_info, print_warning
from utils.simple_json_utils import write_json_file


class PerformanceTiming:
    """Track timing metrics for each generation phase."""

    def __init__(self):
        self.timings: dict[str, float] = {}
        self.phase_order: list[str] = []
        self.detailed_timings: dict[str, list[dict[str, Any]]] = {}
        self.start_time = time.perf_counter()

    def record(self, phase_name: str, duration: float, details: dict[str, Any] | None = None):
        """Record timing for a phase. Repeated phases accumulate."""
        self.timings[phase_name] = self.timings.get(phase_name, 0.0) + duration
        if phase_name not in self.phase_order:
            self.phase_order.append(phase_name)

        if details:
            self.detailed_timings.setdefault(phase_name, []).append(details)

    @contextmanager
    def time_phase(self, phase_name: str, details: dict[str, Any] | None = None, silent: bool = False):
        """Context manager for timing a phase.

        Usage:
            with timing.time_phase("Sitemap"):
                # ... operations ...
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start
            self.record(phase_name, duration, details)
            if not silent:
                print_info(f"{phase_name}: {duration * 1000:.1f}ms", indent=1)

    def get_summary(self) -> dict[str, Any]:
        total_time = time.perf_counter() - self.start_time
        accounted_time = sum(self.timings.values())

        return {
            "total_time": total_time,
            "accounted_time": accounted_time,
            "unaccounted_time": max(0.0, total_time - accounted_time),
            "phases": dict(self.timings),
            "phase_order": list(self.phase_order),
            "detailed_timings": self.detailed_timings,
        }

    def print_summary(self):
        """Print the per-phase breakdown as a table."""
        summary = self.get_summary()
        total = summary["total_time"]

        rows = []
        for phase_name in self.phase_order:
            duration = self.timings[phase_name]
            percent = (duration / total * 100) if total > 0 else 0
            rows.append([phase_name, f"{duration * 1000:.1f}ms", f"{percent:5.1f}%"])
        rows.append(["Total", f"{total * 1000:.1f}ms", "100.0%"])

        console.table("Generation timing", ["Phase", "Duration", "Share"], rows)

    def save_to_file(self, output_path: str):
        """Save timing data to a JSON file."""
        summary = self.get_summary()
        summary["timestamp"] = datetime.now().isoformat()

        try:
            write_json_file(output_path, summary)
            print_info(f"Timing data saved to {output_path}")
        except OSError as e:
            print_warning(f"Failed to save timing data: {e}")


# Global timing instance
_global_timing = None


def get_timing() -> PerformanceTiming:
    """Get or create global timing instance."""
    global _global_timing
    if _global_timing is None:
        _global_timing = PerformanceTiming()
    return _global_timing


def reset_timing():
    """Reset global timing instance."""
    global _global_timing
    _global_timing = PerformanceTiming()
