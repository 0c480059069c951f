"""In-page metric collection: render time, layout shift and heap memory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Page

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024

_NOW_SCRIPT = "() => window.performance.now()"

_MEMORY_SCRIPT = """() => {
    const memory = window.performance.memory;
    return memory ? memory.usedJSHeapSize : null;
}"""

_LAYOUT_SHIFT_INSTALL_SCRIPT = """() => {
    const state = { score: 0 };
    const record = (entries) => {
        for (const entry of entries) {
            // Shifts caused by recent user input do not count towards CLS
            if (!entry.hadRecentInput) {
                state.score += entry.value;
            }
        }
    };
    const observer = new PerformanceObserver((list) => record(list.getEntries()));
    observer.observe({ type: 'layout-shift', buffered: true });
    window.__uiperfLayoutShift = { state, observer, record };
}"""

_LAYOUT_SHIFT_DISCONNECT_SCRIPT = """() => {
    const handle = window.__uiperfLayoutShift;
    if (!handle) {
        return 0;
    }
    handle.record(handle.observer.takeRecords());
    handle.observer.disconnect();
    delete window.__uiperfLayoutShift;
    return handle.state.score;
}"""


def selector_for_test_id(test_id: str) -> str:
    """CSS selector for an element tagged with data-test-subj."""
    return f'[data-test-subj="{test_id}"]'


async def collect_render_time(page: Page, test_id: str, timeout_ms: int) -> float:
    """Milliseconds from now until the element with test_id is visible.

    A Playwright TimeoutError propagates if the element never shows up.
    """
    start = await page.evaluate(_NOW_SCRIPT)
    await page.locator(selector_for_test_id(test_id)).first.wait_for(
        state="visible", timeout=timeout_ms,
    )
    end = await page.evaluate(_NOW_SCRIPT)
    render_time = end - start
    logger.debug("Render time for %s: %.2fms", test_id, render_time)
    return render_time


class LayoutShiftReading:
    """Holds the cumulative layout shift once the observer is disconnected."""

    def __init__(self) -> None:
        self.score: float = 0.0
        self.closed = False


@asynccontextmanager
async def observe_layout_shift(page: Page) -> AsyncIterator[LayoutShiftReading]:
    """Observe layout shifts for the duration of the block.

    The observer is always disconnected on exit, and the accumulated
    score is available on the yielded reading afterwards.
    """
    await page.evaluate(_LAYOUT_SHIFT_INSTALL_SCRIPT)
    reading = LayoutShiftReading()
    try:
        yield reading
    finally:
        score = await page.evaluate(_LAYOUT_SHIFT_DISCONNECT_SCRIPT)
        reading.score = float(score or 0)
        reading.closed = True


async def collect_layout_shift(page: Page, window_ms: int = 2000) -> float:
    """Cumulative layout shift accumulated over a fixed window."""
    async with observe_layout_shift(page) as reading:
        await page.wait_for_timeout(window_ms)
    logger.debug("Layout shift over %dms: %.4f", window_ms, reading.score)
    return reading.score


async def collect_memory_mb(page: Page) -> float | None:
    """Used JS heap in megabytes, or None where performance.memory is unavailable."""
    used_bytes = await page.evaluate(_MEMORY_SCRIPT)
    if used_bytes is None:
        logger.debug("performance.memory not exposed by this browser")
        return None
    return used_bytes / BYTES_PER_MB
