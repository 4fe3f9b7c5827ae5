import sys

import pytest

from subcast.exceptions import ProcessFailedError, ProcessSpawnError, ProcessTimeoutError
from subcast.utils.subprocess import run_subprocess


@pytest.mark.asyncio
async def test_run_subprocess_executes_command() -> None:
    result = await run_subprocess([sys.executable, "-c", "import sys; sys.stdout.write('hi')"])
    assert result.returncode == 0
    assert result.stdout == b"hi"
    assert result.stdout_text == "hi"


@pytest.mark.asyncio
async def test_run_subprocess_raises_on_non_zero_exit() -> None:
    code = "import sys; sys.stderr.write('bad input\\n'); sys.exit(3)"
    with pytest.raises(ProcessFailedError) as exc_info:
        await run_subprocess([sys.executable, "-c", code])
    assert exc_info.value.exit_code == 3
    assert "bad input" in exc_info.value.stderr


@pytest.mark.asyncio
async def test_run_subprocess_without_check_returns_exit_code() -> None:
    result = await run_subprocess([sys.executable, "-c", "import sys; sys.exit(2)"], check=False)
    assert result.returncode == 2


@pytest.mark.asyncio
async def test_run_subprocess_missing_executable_is_spawn_error() -> None:
    with pytest.raises(ProcessSpawnError) as exc_info:
        await run_subprocess(["definitely-not-a-real-binary-subcast"])
    assert exc_info.value.executable == "definitely-not-a-real-binary-subcast"


@pytest.mark.asyncio
async def test_run_subprocess_timeout_kills_child() -> None:
    with pytest.raises(ProcessTimeoutError) as exc_info:
        await run_subprocess([sys.executable, "-c", "import time; time.sleep(10)"], timeout_s=0.3)
    assert exc_info.value.exit_code == -1


@pytest.mark.asyncio
async def test_run_subprocess_streams_stderr_lines_to_sink() -> None:
    lines: list[str] = []
    code = "import sys; [sys.stderr.write(f'progress {i}\\n') for i in range(3)]"
    result = await run_subprocess([sys.executable, "-c", code], stderr_sink=lines.append)
    assert lines == ["progress 0", "progress 1", "progress 2"]
    assert result.stderr_text.count("progress") == 3
