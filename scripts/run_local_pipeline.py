from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from subcast.config import Settings
from subcast.exceptions import StageExecutionError
from subcast.pipeline import create_orchestrator
from subcast.utils.logging_setup import setup_logging


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the SubCast pipeline on a local video file.")
    parser.add_argument("--media", required=True, help="Path to local video file")
    parser.add_argument("--storage-root", default=None, help="Storage root (defaults to settings)")
    parser.add_argument(
        "--keep-input",
        action="store_true",
        help="Keep the input video after a successful run",
    )
    parser.add_argument("--language", default=None, help="Transcription language code")
    parser.add_argument("--model", default=None, help="Whisper model name")
    parser.add_argument(
        "--print-subtitle",
        action="store_true",
        help="Print the generated SubRip text",
    )
    return parser.parse_args()


async def _run() -> int:
    args = _parse_args()
    media_path = Path(args.media)
    if not media_path.exists():
        raise SystemExit(f"Media not found: {media_path}")

    settings = Settings(storage_root=args.storage_root) if args.storage_root else Settings()
    if args.keep_input:
        settings.pipeline.delete_input_on_success = False
    if args.language:
        settings.whisper.language = str(args.language)
    if args.model:
        settings.whisper.model = str(args.model)
    setup_logging(settings)

    orchestrator = create_orchestrator(settings)
    job = orchestrator.create_job(media_path.resolve())
    try:
        result = await orchestrator.run(job)
    except StageExecutionError as exc:
        print(f"job_id={job.id} status=failed stage={exc.stage} error_code={exc.error_code.value}")
        print(exc.message)
        return 1
    finally:
        await orchestrator.media_tool.close()

    print(
        f"job_id={result.job_id} status={job.status.value} "
        f"quality={result.transcript_quality.value} video={result.video_path}"
    )
    if args.print_subtitle:
        print(result.subtitle_text)
    return 0


def main() -> None:
    raise SystemExit(asyncio.run(_run()))


if __name__ == "__main__":
    main()
