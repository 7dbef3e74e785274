import asyncio
import logging
import os
import tempfile
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import async_playwright

log = logging.getLogger("sitecarbon")

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    # let Chromium bind a free port and report it in DevToolsActivePort
    "--remote-debugging-port=0",
]
PORT_FILE = "DevToolsActivePort"


async def read_devtools_port(user_data_dir: str, timeout: float = 10) -> int:
    path = os.path.join(user_data_dir, PORT_FILE)
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while True:
        try:
            with open(path, encoding="utf-8") as f:
                first_line = f.readline().strip()
            if first_line.isdigit():
                return int(first_line)
        except FileNotFoundError:
            pass
        if loop.time() >= deadline:
            raise RuntimeError("Chromium did not report a DevTools port")
        await asyncio.sleep(0.05)


@asynccontextmanager
async def launch_browser(headless: bool = True, port_timeout: float = 10) -> AsyncIterator[int]:
    """
    Launch a dedicated headless Chromium with its own profile directory and
    yield its DevTools port. The browser is closed on every exit path; a
    failing close is logged and never replaces the outcome of the block.
    """
    with tempfile.TemporaryDirectory(prefix="sitecarbon-", ignore_cleanup_errors=True) as user_data_dir:
        async with async_playwright() as p:
            context = await p.chromium.launch_persistent_context(
                user_data_dir,
                headless=headless,
                args=BROWSER_ARGS,
            )
            try:
                port = await read_devtools_port(user_data_dir, port_timeout)
                log.info("Launched Chromium (debugging port %s)", port)
                yield port
            finally:
                try:
                    await context.close()
                except Exception as e:
                    log.warning("Browser teardown failed: %s", e)
