from __future__ import annotations

from pathlib import Path

import pytest

from subcast.exceptions import (
    BurnFailedError,
    ExtractionFailedError,
    InputNotFoundError,
    OutputMissingOrEmptyError,
)
from subcast.models.artifact import ArtifactKind
from subcast.providers.media.ffmpeg import FFmpegProvider, build_extract_audio_args
from subcast.utils.ffmpeg import escape_filter_path, subtitles_filter
from subcast.utils.subprocess import RunResult


def _provider(fake_bin, fake_runner, **kwargs) -> FFmpegProvider:
    return FFmpegProvider(fake_bin("ffmpeg"), runner=fake_runner, **kwargs)


def test_extract_audio_args_are_canonical_wav() -> None:
    args = build_extract_audio_args("ffmpeg", "in.mp4", "out.wav")
    assert args[0] == "ffmpeg"
    assert "-vn" in args
    assert args[args.index("-ac") + 1] == "1"
    assert args[args.index("-ar") + 1] == "16000"
    assert args[args.index("-acodec") + 1] == "pcm_s16le"
    assert args[args.index("-f") + 1] == "wav"
    assert args[-1] == "out.wav"


def test_escape_filter_path_handles_drive_colon_and_quote() -> None:
    assert escape_filter_path("C:\\temp\\it's.srt") == "C\\:/temp/it\\'s.srt"
    assert (
        subtitles_filter("C:\\temp\\it's.srt", "FontSize=24")
        == "subtitles='C\\:/temp/it\\'s.srt:force_style=FontSize=24'"
    )
    assert subtitles_filter("/tmp/a.srt") == "subtitles='/tmp/a.srt'"


@pytest.mark.asyncio
async def test_extract_audio_writes_uniquely_named_wav(
    tmp_path, fake_bin, fake_runner, writes_output
) -> None:
    fake_runner.handlers["ffmpeg"] = writes_output
    video = tmp_path / "clip.mp4"
    video.write_bytes(b"\x00" * 10)

    provider = _provider(fake_bin, fake_runner)
    first = await provider.extract_audio(str(video), str(tmp_path / "audios"))
    second = await provider.extract_audio(str(video), str(tmp_path / "audios"))

    assert first.kind == ArtifactKind.AUDIO
    assert first.path.parent == tmp_path / "audios"
    assert first.path.name.startswith("clip-") and first.path.suffix == ".wav"
    assert first.path != second.path
    assert first.path.exists()
    assert fake_runner.calls[0][-1] == str(first.path)


@pytest.mark.asyncio
async def test_extract_audio_failure_carries_exit_code(
    tmp_path, fake_bin, fake_runner, failing
) -> None:
    fake_runner.handlers["ffmpeg"] = failing(1, b"Invalid data found when processing input")
    video = tmp_path / "broken.mp4"
    video.write_bytes(b"garbage")

    provider = _provider(fake_bin, fake_runner)
    with pytest.raises(ExtractionFailedError) as exc_info:
        await provider.extract_audio(str(video), str(tmp_path / "audios"))

    assert exc_info.value.exit_code == 1
    assert "Invalid data" in exc_info.value.stderr
    assert list((tmp_path / "audios").glob("*.wav")) == []


@pytest.mark.asyncio
async def test_extract_audio_missing_input(tmp_path, fake_bin, fake_runner) -> None:
    provider = _provider(fake_bin, fake_runner)
    with pytest.raises(InputNotFoundError):
        await provider.extract_audio(str(tmp_path / "nope.mp4"), str(tmp_path))
    assert fake_runner.calls == []


@pytest.mark.asyncio
async def test_burn_subtitles_mp4_uses_utf8_copy_and_cleans_temp_dir(
    tmp_path, fake_bin, fake_runner
) -> None:
    temp_root = tmp_path / "work"
    seen: dict[str, bytes] = {}

    def _burn(argv: list[str]) -> RunResult:
        copies = list(temp_root.glob("burn-*/temp.srt"))
        assert len(copies) == 1
        seen["subtitle"] = copies[0].read_bytes()
        seen["filter"] = argv[argv.index("-vf") + 1].encode()
        Path(argv[-1]).write_bytes(b"\x00" * 128)
        return RunResult(0, b"", b"")

    fake_runner.handlers["ffmpeg"] = _burn
    video = tmp_path / "clip.mp4"
    video.write_bytes(b"\x00" * 10)
    srt = tmp_path / "clip.srt"
    srt.write_bytes("\ufeff1\n00:00:00,000 --> 00:00:01,000\nhi\n\n".encode("utf-8"))

    provider = _provider(fake_bin, fake_runner, force_style="FontSize=24")
    artifact = await provider.burn_subtitles(
        str(video), str(srt), str(tmp_path / "videos"), temp_root=str(temp_root)
    )

    assert artifact.kind == ArtifactKind.VIDEO
    assert artifact.path == tmp_path / "videos" / "clip-subtitled.mp4"
    assert artifact.size_bytes() == 128
    assert not seen["subtitle"].startswith(b"\xef\xbb\xbf")
    assert seen["filter"].startswith(b"subtitles='")
    assert b":force_style=FontSize=24'" in seen["filter"]
    assert list(temp_root.glob("burn-*")) == []

    argv = fake_runner.calls[0]
    assert argv[argv.index("-c:v") + 1] == "libx264"
    assert argv[argv.index("-crf") + 1] == "23"
    assert argv[argv.index("-c:a") + 1] == "copy"
    assert argv[argv.index("-movflags") + 1] == "+faststart"


@pytest.mark.asyncio
async def test_burn_subtitles_webm_converts_and_deletes_intermediate(
    tmp_path, fake_bin, fake_runner, writes_output
) -> None:
    fake_runner.handlers["ffmpeg"] = writes_output
    video = tmp_path / "clip.webm"
    video.write_bytes(b"\x1a\x45\xdf\xa3")
    srt = tmp_path / "clip.srt"
    srt.write_text("1\n00:00:00,000 --> 00:00:01,000\nhi\n\n", encoding="utf-8")
    out_dir = tmp_path / "videos"

    provider = _provider(fake_bin, fake_runner)
    artifact = await provider.burn_subtitles(str(video), str(srt), str(out_dir))

    assert len(fake_runner.calls) == 2
    convert, burn = fake_runner.calls
    assert convert[-1] == str(out_dir / "clip-temp.mp4")
    assert convert[convert.index("-c:a") + 1] == "aac"
    assert burn[burn.index("-i") + 1] == str(out_dir / "clip-temp.mp4")
    assert artifact.path == out_dir / "clip-subtitled.mp4"
    assert not (out_dir / "clip-temp.mp4").exists()


@pytest.mark.asyncio
async def test_burn_failure_still_removes_intermediate(tmp_path, fake_bin, fake_runner) -> None:
    def _handler(argv: list[str]) -> RunResult:
        if argv[-1].endswith("-temp.mp4"):
            Path(argv[-1]).write_bytes(b"\x00" * 16)
            return RunResult(0, b"", b"")
        return RunResult(1, b"", b"Unable to open subtitle file")

    fake_runner.handlers["ffmpeg"] = _handler
    video = tmp_path / "clip.webm"
    video.write_bytes(b"\x1a\x45\xdf\xa3")
    srt = tmp_path / "clip.srt"
    srt.write_text("1\n00:00:00,000 --> 00:00:01,000\nhi\n\n", encoding="utf-8")
    out_dir = tmp_path / "videos"

    provider = _provider(fake_bin, fake_runner)
    with pytest.raises(BurnFailedError) as exc_info:
        await provider.burn_subtitles(str(video), str(srt), str(out_dir))

    assert exc_info.value.exit_code == 1
    assert not (out_dir / "clip-temp.mp4").exists()
    assert not (out_dir / "clip-subtitled.mp4").exists()


@pytest.mark.asyncio
async def test_burn_empty_output_is_reported(tmp_path, fake_bin, fake_runner) -> None:
    def _empty(argv: list[str]) -> RunResult:
        Path(argv[-1]).write_bytes(b"")
        return RunResult(0, b"", b"")

    fake_runner.handlers["ffmpeg"] = _empty
    video = tmp_path / "clip.mp4"
    video.write_bytes(b"\x00")
    srt = tmp_path / "clip.srt"
    srt.write_text("1\n00:00:00,000 --> 00:00:01,000\nhi\n\n", encoding="utf-8")

    provider = _provider(fake_bin, fake_runner)
    with pytest.raises(OutputMissingOrEmptyError):
        await provider.burn_subtitles(str(video), str(srt), str(tmp_path / "videos"))
    assert not (tmp_path / "videos" / "clip-subtitled.mp4").exists()
