"""Lighthouse runner with a fake browser scope and subprocess."""
import asyncio
import json
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

import pytest

from sitecarbon.audit.runner import AuditFailure, LighthouseRunner


class FakeBrowser:
    def __init__(self, fail_launch=False):
        self.fail_launch = fail_launch
        self.opened = 0
        self.closed = 0

    @asynccontextmanager
    async def __call__(self):
        if self.fail_launch:
            raise RuntimeError("Executable doesn't exist")
        self.opened += 1
        try:
            yield 9333
        finally:
            self.closed += 1


class FakeProcess:
    def __init__(self, stdout=b"", stderr=b"", returncode=0, hang=False):
        self._stdout = stdout
        self._stderr = stderr
        self._returncode = returncode
        self.hang = hang
        self.returncode = None
        self.killed = False

    async def communicate(self):
        if self.hang:
            await asyncio.sleep(3600)
        self.returncode = self._returncode
        return self._stdout, self._stderr

    def kill(self):
        self.killed = True
        self.returncode = -9

    async def wait(self):
        return self.returncode


def run(runner, url="https://example.com"):
    return asyncio.run(runner.run(url))


class TestLighthouseRunner:
    """Lighthouse subprocess handling inside the browser scope."""

    def test_returns_report_and_closes_browser(self, sample_report):
        browser = FakeBrowser()
        proc = FakeProcess(stdout=json.dumps(sample_report).encode())
        runner = LighthouseRunner(lighthouse_bin="lh", browser=browser)

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)) as spawn:
            report = run(runner)

        assert report == sample_report
        assert (browser.opened, browser.closed) == (1, 1)
        args = spawn.call_args.args
        assert args[:2] == ("lh", "https://example.com")
        assert "--port=9333" in args
        assert "--output=json" in args
        assert "--only-categories=performance,accessibility,best-practices,seo" in args

    def test_nonzero_exit(self):
        browser = FakeBrowser()
        proc = FakeProcess(stderr=b"Unable to connect to Chrome", returncode=1)

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            with pytest.raises(AuditFailure, match="Unable to connect to Chrome"):
                run(LighthouseRunner(browser=browser))
        assert browser.closed == 1

    def test_runtime_error_in_report(self):
        browser = FakeBrowser()
        report = {"runtimeError": {"code": "ERRORED_DOCUMENT_REQUEST", "message": "Could not load the page"}}
        proc = FakeProcess(stdout=json.dumps(report).encode())

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            with pytest.raises(AuditFailure, match="Could not load the page"):
                run(LighthouseRunner(browser=browser))
        assert browser.closed == 1

    def test_unreadable_output(self):
        browser = FakeBrowser()
        proc = FakeProcess(stdout=b"not json")

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            with pytest.raises(AuditFailure, match="unreadable report"):
                run(LighthouseRunner(browser=browser))
        assert browser.closed == 1

    def test_timeout_kills_process(self):
        browser = FakeBrowser()
        proc = FakeProcess(hang=True)

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            with pytest.raises(AuditFailure, match="timed out"):
                run(LighthouseRunner(timeout=0.01, browser=browser))
        assert proc.killed
        assert browser.closed == 1

    def test_missing_lighthouse_binary(self):
        browser = FakeBrowser()
        spawn = AsyncMock(side_effect=FileNotFoundError("lighthouse"))

        with patch("asyncio.create_subprocess_exec", spawn):
            with pytest.raises(AuditFailure, match="Lighthouse audit failed"):
                run(LighthouseRunner(browser=browser))
        assert browser.closed == 1

    def test_browser_launch_failure(self):
        browser = FakeBrowser(fail_launch=True)

        with pytest.raises(AuditFailure, match="Executable doesn't exist"):
            run(LighthouseRunner(browser=browser))
        assert browser.opened == 0
