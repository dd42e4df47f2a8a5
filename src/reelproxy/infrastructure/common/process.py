"""Async child-process runner with timeout and categorized outcome."""

from __future__ import annotations

import asyncio
import enum
from collections.abc import Sequence
from dataclasses import dataclass

import structlog

log = structlog.get_logger(__name__)


class ProcessStatus(enum.Enum):
    OK = "ok"
    NOT_FOUND = "not_found"  # executable missing / not executable
    EXIT_ERROR = "exit_error"  # non-zero exit code
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one child-process run."""

    status: ProcessStatus
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""

    def stderr_tail(self, max_chars: int = 500) -> str:
        return self.stderr.strip()[-max_chars:]


async def run_process(argv: Sequence[str], *, timeout: float) -> ProcessResult:
    """Run *argv* without a shell and collect its output.

    The child is killed when *timeout* elapses. Never raises for the
    categorized failure modes; the caller decides how to surface them.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (FileNotFoundError, PermissionError) as e:
        log.error("process_spawn_failed", executable=argv[0], error=str(e))
        return ProcessResult(status=ProcessStatus.NOT_FOUND, stderr=str(e))

    try:
        out, err = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        log.error("process_timeout", executable=argv[0], timeout=timeout)
        return ProcessResult(status=ProcessStatus.TIMEOUT, returncode=proc.returncode)
    except asyncio.CancelledError:
        if proc.returncode is None:
            proc.kill()
        log.warning("process_cancelled", executable=argv[0])
        raise

    stdout = out.decode("utf-8", errors="replace")
    stderr = err.decode("utf-8", errors="replace")

    if proc.returncode != 0:
        log.error(
            "process_exit_error",
            executable=argv[0],
            returncode=proc.returncode,
            stderr=stderr.strip()[-2000:],
        )
        return ProcessResult(
            status=ProcessStatus.EXIT_ERROR,
            returncode=proc.returncode,
            stdout=stdout,
            stderr=stderr,
        )

    return ProcessResult(
        status=ProcessStatus.OK, returncode=0, stdout=stdout, stderr=stderr
    )
