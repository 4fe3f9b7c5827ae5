"""Subtitle document models."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from subcast.exceptions import SubtitleFormatError


@dataclass(frozen=True)
class SubtitleCue:
    index: int
    start: float  # seconds
    end: float  # seconds
    text: str


@dataclass
class SubtitleDocument:
    """Ordered SubRip cues.

    Indices start at 1 and strictly increase; each cue has start < end. Cues
    may overlap.
    """

    cues: list[SubtitleCue] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.validate()

    def __iter__(self) -> Iterator[SubtitleCue]:
        return iter(self.cues)

    def __len__(self) -> int:
        return len(self.cues)

    def validate(self) -> None:
        previous = 0
        for cue in self.cues:
            if cue.index <= previous:
                raise SubtitleFormatError(
                    f"cue index {cue.index} must be greater than {previous}"
                )
            if previous == 0 and cue.index != 1:
                raise SubtitleFormatError(f"first cue index must be 1 (got {cue.index})")
            if not cue.start < cue.end:
                raise SubtitleFormatError(
                    f"cue {cue.index}: start ({cue.start}) must be before end ({cue.end})"
                )
            previous = cue.index

    @classmethod
    def from_texts(cls, items: list[tuple[float, float, str]]) -> SubtitleDocument:
        """Build a document from (start, end, text) tuples, numbering from 1."""
        cues = [
            SubtitleCue(index=i, start=float(start), end=float(end), text=str(text))
            for i, (start, end, text) in enumerate(items, start=1)
        ]
        return cls(cues=cues)

    @property
    def text(self) -> str:
        return "\n".join(cue.text for cue in self.cues)
