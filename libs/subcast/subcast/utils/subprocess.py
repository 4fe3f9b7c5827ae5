"""Async subprocess runner for external encoder/recognizer binaries.

Children are spawned with an explicit argument vector (never through a shell).
stderr is consumed line by line so long-running encoders can report progress
while stdout is captured for callers that parse it.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from subcast.exceptions import ProcessFailedError, ProcessSpawnError, ProcessTimeoutError

logger = logging.getLogger("subcast.process")

StderrSink = Callable[[str], None]

_STDERR_TAIL_CHARS = 8000


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


def _log_stderr_line(line: str) -> None:
    logger.debug("%s", line)


async def _pump_stderr(stream: asyncio.StreamReader, sink: StderrSink, buf: bytearray) -> None:
    while True:
        line = await stream.readline()
        if not line:
            return
        buf.extend(line)
        text = line.decode("utf-8", errors="replace").rstrip()
        if text:
            sink(text)


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    try:
        process.kill()
    except ProcessLookupError:
        return
    await process.wait()


async def run_subprocess(
    args: Sequence[str],
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
    timeout_s: float | None = None,
    check: bool = True,
    stderr_sink: StderrSink | None = None,
) -> RunResult:
    """Run `args` and wait for it to exit.

    Raises:
        ProcessSpawnError: the executable could not be launched.
        ProcessFailedError: `check` is set and the exit code is non-zero.
        ProcessTimeoutError: `timeout_s` elapsed; the child has been killed.
    """
    argv = [str(a) for a in args]
    if not argv:
        raise ValueError("args must not be empty")
    sink = stderr_sink or _log_stderr_line

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
            env={**os.environ, **env} if env is not None else None,
        )
    except (FileNotFoundError, PermissionError, NotADirectoryError) as exc:
        raise ProcessSpawnError(argv[0], exc.strerror or str(exc)) from exc
    except OSError as exc:
        raise ProcessSpawnError(argv[0], str(exc)) from exc

    assert process.stdout is not None and process.stderr is not None
    stderr_buf = bytearray()

    async def _communicate() -> bytes:
        stderr_task = asyncio.create_task(_pump_stderr(process.stderr, sink, stderr_buf))
        try:
            out = await process.stdout.read()
            await stderr_task
        finally:
            if not stderr_task.done():
                stderr_task.cancel()
        await process.wait()
        return out

    try:
        if timeout_s is not None:
            stdout = await asyncio.wait_for(_communicate(), timeout=float(timeout_s))
        else:
            stdout = await _communicate()
    except asyncio.TimeoutError:
        await _kill(process)
        raise ProcessTimeoutError(
            argv, float(timeout_s or 0), bytes(stderr_buf).decode("utf-8", errors="replace")
        ) from None
    except asyncio.CancelledError:
        logger.info("cancelled; killing child (pid=%s, cmd=%s)", process.pid, argv[0])
        await _kill(process)
        raise

    result = RunResult(
        returncode=int(process.returncode or 0),
        stdout=stdout or b"",
        stderr=bytes(stderr_buf),
    )
    if check and result.returncode != 0:
        raise ProcessFailedError(argv, result.returncode, result.stderr_text[-_STDERR_TAIL_CHARS:])
    return result
