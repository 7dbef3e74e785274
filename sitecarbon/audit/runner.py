import asyncio
import json
import logging
from typing import Any, Callable, Dict, List

from sitecarbon.config import AUDIT_TIMEOUT, LIGHTHOUSE_BIN
from sitecarbon.crawler.browser import launch_browser

log = logging.getLogger("sitecarbon")

CATEGORIES = ("performance", "accessibility", "best-practices", "seo")


class AuditFailure(Exception):
    """Browser launch, navigation or Lighthouse execution failed."""


class LighthouseRunner:
    def __init__(
        self,
        lighthouse_bin: str = LIGHTHOUSE_BIN,
        timeout: float = AUDIT_TIMEOUT,
        browser: Callable = launch_browser,
    ):
        self.lighthouse_bin = lighthouse_bin
        self.timeout = timeout
        self.browser = browser

    def command(self, url: str, port: int) -> List[str]:
        return [
            self.lighthouse_bin,
            url,
            f"--port={port}",
            "--output=json",
            "--output-path=stdout",
            f"--only-categories={','.join(CATEGORIES)}",
            "--quiet",
        ]

    async def run(self, url: str) -> Dict[str, Any]:
        """Audit url in its own browser and return the raw Lighthouse report."""
        try:
            async with self.browser() as port:
                return await self._lighthouse(url, port)
        except AuditFailure:
            raise
        except Exception as e:
            raise AuditFailure(f"Lighthouse audit failed: {e}") from e

    async def _lighthouse(self, url: str, port: int) -> Dict[str, Any]:
        proc = await asyncio.create_subprocess_exec(
            *self.command(url, port),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            if proc.returncode is None:
                proc.kill()
            await proc.wait()
            raise AuditFailure(f"Audit timed out after {self.timeout:g}s")

        if proc.returncode != 0:
            tail = stderr.decode(errors="replace").strip()[-500:]
            raise AuditFailure(f"Lighthouse exited with code {proc.returncode}: {tail}")

        try:
            report = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise AuditFailure("Lighthouse produced an unreadable report") from e
        if not isinstance(report, dict):
            raise AuditFailure("Lighthouse produced an unreadable report")

        runtime_error = report.get("runtimeError")
        if isinstance(runtime_error, dict) and runtime_error.get("code"):
            raise AuditFailure(runtime_error.get("message") or runtime_error["code"])

        log.info("Lighthouse audit finished for %s", url)
        return report
