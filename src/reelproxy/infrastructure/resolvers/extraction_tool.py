"""Extraction-tool resolver: runs a local yt-dlp style CLI.

The tool is asked to print only the resolved direct URL(s)::

    yt-dlp --get-url --no-warnings --no-playlist -f "best[ext=mp4]/best" \
        [--cookies cookies.txt] <url>

and the first non-empty stdout line is used. A cookie jar is passed only
when the file exists, so logged-in sessions can be added at runtime.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

import structlog

from reelproxy.domain.exceptions import ResolutionError
from reelproxy.infrastructure.common.process import (
    ProcessResult,
    ProcessStatus,
    run_process,
)

log = structlog.get_logger(__name__)

ProcessRunner = Callable[..., Awaitable[ProcessResult]]


class ExtractionToolResolver:
    """Resolves source page URLs by invoking an external extraction tool."""

    def __init__(
        self,
        *,
        binary: str = "yt-dlp",
        format_selector: str | None = "best[ext=mp4]/best",
        cookies_file: Path | None = None,
        timeout: float = 60.0,
        runner: ProcessRunner = run_process,
    ) -> None:
        self._binary = binary
        self._format = format_selector
        self._cookies_file = cookies_file
        self._timeout = timeout
        self._runner = runner

    @property
    def name(self) -> str:
        return Path(self._binary).name

    @property
    def uses_cookies(self) -> bool:
        return self._cookies_file is not None and self._cookies_file.is_file()

    def build_command(self, url: str) -> list[str]:
        argv = [self._binary, "--get-url", "--no-warnings", "--no-playlist"]
        if self._format:
            argv += ["-f", self._format]
        if self.uses_cookies:
            argv += ["--cookies", str(self._cookies_file)]
        argv.append(url)
        return argv

    async def resolve(self, url: str) -> str:
        argv = self.build_command(url)
        log.info("extraction_tool_resolving", url=url, cookies=self.uses_cookies)
        result = await self._runner(argv, timeout=self._timeout)

        if result.status is ProcessStatus.NOT_FOUND:
            raise ResolutionError(
                f"extraction tool not installed: {self._binary}",
                details=result.stderr or None,
            )
        if result.status is ProcessStatus.TIMEOUT:
            raise ResolutionError(
                f"extraction tool timed out after {self._timeout:g}s"
            )
        if result.status is ProcessStatus.EXIT_ERROR:
            raise ResolutionError(
                f"extraction failed (exit code {result.returncode})",
                details=result.stderr_tail() or None,
            )

        direct_url = _first_line(result.stdout.splitlines())
        if direct_url is None:
            log.error("extraction_tool_no_output", url=url)
            raise ResolutionError("extraction tool returned no media URL")

        log.info("extraction_tool_resolved", url=url, direct_url=direct_url[:80])
        return direct_url


def _first_line(lines: Sequence[str]) -> str | None:
    for line in lines:
        if line.strip():
            return line.strip()
    return None
