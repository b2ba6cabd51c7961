"""Cache-aside content layer for the Vidyapith website."""

from vidyapith_content.content_kinds import ALL_KINDS, ContentKind, kind_for_name
from vidyapith_content.daily_gate import DailyGate, GateState
from vidyapith_content.errors import CacheCorrupt, ContentError, FetchFailed, PersistWriteFailed
from vidyapith_content.service import ContentService
from vidyapith_content.store import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from vidyapith_content.typed_cache import CacheEntry, CacheResult, TypedCache

__all__ = [
    "ALL_KINDS",
    "CacheCorrupt",
    "CacheEntry",
    "CacheResult",
    "ContentError",
    "ContentKind",
    "ContentService",
    "DailyGate",
    "FetchFailed",
    "FileKeyValueStore",
    "GateState",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "PersistWriteFailed",
    "TypedCache",
    "kind_for_name",
]
