"""Filesystem storage layout."""

from subcast.config import Settings
from subcast.storage.layout import StorageLayout


def get_storage_layout(settings: Settings) -> StorageLayout:
    return StorageLayout(settings.storage_root).ensure()


__all__ = ["StorageLayout", "get_storage_layout"]
