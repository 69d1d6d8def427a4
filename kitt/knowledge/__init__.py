"""Knowledge base: in-memory snapshot of the Markdown vault plus change watching."""

from kitt.knowledge.store import KnowledgeSnapshot, KnowledgeStore, SourceMissingError
from kitt.knowledge.watcher import DirectoryWatcher, FileChange, WatchSetupError

__all__ = [
    "DirectoryWatcher",
    "FileChange",
    "KnowledgeSnapshot",
    "KnowledgeStore",
    "SourceMissingError",
    "WatchSetupError",
]
