"""Chromium setup shared by Playwright and Lighthouse."""

from __future__ import annotations

from playwright.async_api import Browser, BrowserContext, Playwright


def audit_launch_args(debugging_port: int) -> list[str]:
    return [
        # Lighthouse attaches to the running browser through this port
        f"--remote-debugging-port={debugging_port}",
        # Unbucketed performance.memory values
        "--enable-precise-memory-info",
    ]


async def launch_audit_browser(
    playwright: Playwright, debugging_port: int, headless: bool = True,
) -> Browser:
    """Launch Chromium so that both Playwright and Lighthouse can drive it."""
    return await playwright.chromium.launch(
        headless=headless,
        args=audit_launch_args(debugging_port),
    )


async def create_audit_context(browser: Browser, viewport: dict) -> BrowserContext:
    """Create a desktop browser context with a fixed viewport and pixel ratio 1."""
    return await browser.new_context(
        viewport=viewport,
        device_scale_factor=1,
        is_mobile=False,
        locale="en-US",
    )
