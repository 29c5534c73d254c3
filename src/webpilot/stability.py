"""Best-effort wait for DOM quiescence after navigation-class commands."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Awaitable, Callable, Optional

from .config import StabilitySettings
from .driver.base import PageHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StabilityOutcome:
    stable: bool
    elapsed_seconds: float
    checks: int = 0
    error: Optional[str] = None

    @property
    def timed_out(self) -> bool:
        return not self.stable and self.error is None


def snapshot_changed(previous: str, current: str, diff_threshold: float) -> bool:
    """
    Whether two snapshots differ by more than ``diff_threshold``.

    ``quick_ratio`` is an upper bound on ``ratio``, so a page that clearly
    changed is detected without the full matching pass.
    """
    xs = previous.split()
    ys = current.split()
    if not xs and not ys:
        return False
    matcher = SequenceMatcher(None, xs, ys)
    if 1.0 - matcher.quick_ratio() > diff_threshold:
        return True
    return 1.0 - matcher.ratio() > diff_threshold


async def poll_until_stable(
    read_snapshot: Callable[[], Awaitable[str]],
    *,
    interval_seconds: float,
    diff_threshold: float,
    timeout_seconds: float,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> StabilityOutcome:
    """
    Compare DOM snapshots one interval apart until they stop changing.

    At least one comparison is always made. The page counts as stable once the
    difference between consecutive snapshots is at or below ``diff_threshold``;
    otherwise polling stops after ``timeout_seconds`` and the outcome reports
    ``stable=False``. Comparisons run in a worker thread so large pages do not
    stall the event loop.
    """
    started = clock()
    previous = await read_snapshot()
    checks = 0
    while True:
        await sleep(max(0.0, interval_seconds))
        current = await read_snapshot()
        checks += 1
        changed = await asyncio.to_thread(snapshot_changed, previous, current, diff_threshold)
        if not changed:
            return StabilityOutcome(stable=True, elapsed_seconds=clock() - started, checks=checks)
        previous = current
        elapsed = clock() - started
        if elapsed >= timeout_seconds:
            return StabilityOutcome(stable=False, elapsed_seconds=elapsed, checks=checks)


class StabilityWaiter:
    """Runs the driver's stability wait with configured values; never raises."""

    def __init__(self, settings: Optional[StabilitySettings] = None) -> None:
        self.settings = settings or StabilitySettings()

    async def wait(self, page: PageHandle) -> StabilityOutcome:
        started = time.monotonic()
        try:
            stable = await page.wait_dom_stable(
                interval_seconds=self.settings.interval_seconds,
                diff_threshold=self.settings.diff_threshold,
                timeout_seconds=self.settings.timeout_seconds,
            )
        except Exception as exc:
            elapsed = time.monotonic() - started
            logger.warning("DOM stability wait failed after %.2fs: %s", elapsed, exc)
            return StabilityOutcome(stable=False, elapsed_seconds=elapsed, error=str(exc))

        outcome = StabilityOutcome(stable=bool(stable), elapsed_seconds=time.monotonic() - started)
        if outcome.stable:
            logger.debug("DOM stable after %.2fs", outcome.elapsed_seconds)
        else:
            logger.info(
                "DOM still changing after %.2fs, continuing anyway", outcome.elapsed_seconds
            )
        return outcome
