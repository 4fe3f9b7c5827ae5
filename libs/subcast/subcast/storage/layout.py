"""Upload directory layout under the configured storage root."""

from __future__ import annotations

from pathlib import Path

from subcast.exceptions import ArtifactNotFoundError


class StorageLayout:
    """`uploads/{videos,audios,subtitles,thumbnails,work}` under one root."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.uploads_dir = self.root / "uploads"
        self.videos_dir = self.uploads_dir / "videos"
        self.audios_dir = self.uploads_dir / "audios"
        self.subtitles_dir = self.uploads_dir / "subtitles"
        self.thumbnails_dir = self.uploads_dir / "thumbnails"
        self.work_dir = self.uploads_dir / "work"

    def ensure(self) -> "StorageLayout":
        for d in (
            self.videos_dir,
            self.audios_dir,
            self.subtitles_dir,
            self.thumbnails_dir,
            self.work_dir,
        ):
            d.mkdir(parents=True, exist_ok=True)
        return self

    def job_work_dir(self, job_id: str) -> Path:
        return self.work_dir / job_id

    def resolve_video(self, filename: str) -> Path:
        """Resolve a client-supplied name to a file inside `uploads/videos`.

        Only the basename is honored, so `../` sequences cannot escape the
        directory.
        """
        name = Path(str(filename or "").replace("\\", "/")).name
        if not name or name in {".", ".."}:
            raise ArtifactNotFoundError(f"invalid video name: {filename!r}")
        return self.videos_dir / name

    def relative_url_path(self, path: str | Path) -> str:
        """Path of a stored file relative to the storage root, with `/` separators."""
        return "/" + Path(path).resolve().relative_to(self.root.resolve()).as_posix()
