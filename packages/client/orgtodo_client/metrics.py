"""
Poller counters with Prometheus text exposition.

The CLI prints the exposition to stderr after a command when ``--metrics``
is given, so a wrapper script can scrape one run's activity.
"""

from __future__ import annotations

import time
from collections import Counter

PREFIX = "orgtodo_client_"

DESCRIPTIONS = {
    "onboarding_checks_total": "Onboarding status queries sent",
    "onboarding_retries_total": "Status re-queries scheduled",
    "onboarding_degraded_total": "Completions forced ready after retries ran out",
    "onboarding_errors_total": "Checks that ended in the error state",
}


class MetricsCollector:
    """Monotonic counters for one client process."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()
        self._started = time.monotonic()

    def inc(self, name: str, value: int = 1) -> None:
        self._counts[name] += value

    def get(self, name: str) -> int:
        return self._counts[name]

    def to_prometheus(self) -> str:
        """Render every known counter, including those still at zero."""
        lines: list[str] = []
        for name in sorted(set(DESCRIPTIONS) | set(self._counts)):
            metric = PREFIX + name
            if name in DESCRIPTIONS:
                lines.append(f"# HELP {metric} {DESCRIPTIONS[name]}")
            lines.append(f"# TYPE {metric} counter")
            lines.append(f"{metric} {self._counts[name]}")
        lines.append(f"# TYPE {PREFIX}uptime_seconds gauge")
        lines.append(f"{PREFIX}uptime_seconds {time.monotonic() - self._started:.3f}")
        return "\n".join(lines) + "\n"
