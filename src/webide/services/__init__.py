"""Service layer helpers (blob stores, persistence, settings)."""

from .blob_store import BlobStore, FileBlobStore, InMemoryBlobStore
from .persistence import DEFAULT_STORAGE_KEY, PersistenceGateway
from .settings import Settings, SettingsStore

__all__ = [
    "BlobStore",
    "FileBlobStore",
    "InMemoryBlobStore",
    "DEFAULT_STORAGE_KEY",
    "PersistenceGateway",
    "Settings",
    "SettingsStore",
]
