"""Processing stages."""

from subcast.stages.base import Stage
from subcast.stages.burn_subtitles import BurnSubtitlesStage
from subcast.stages.extract_audio import ExtractAudioStage
from subcast.stages.transcribe import TranscribeStage

__all__ = [
    "BurnSubtitlesStage",
    "ExtractAudioStage",
    "Stage",
    "TranscribeStage",
]
