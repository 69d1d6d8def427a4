"""Directory change stream backed by watchdog.

The observer runs in its own thread; events are handed to the asyncio loop
through ``call_soon_threadsafe`` and consumed as an async iterator.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator, Callable
from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

_WATCHED_KINDS = frozenset({"created", "modified", "deleted", "moved"})


class WatchSetupError(RuntimeError):
    """Raised when the change watcher cannot be established."""


@dataclass(frozen=True, slots=True)
class FileChange:
    kind: str  # created | modified | deleted | moved
    path: Path


class _SuffixHandler(FileSystemEventHandler):
    """Forward file events whose name ends with *suffix*."""

    def __init__(self, suffix: str, emit: Callable[[FileChange], None]) -> None:
        super().__init__()
        self._suffix = suffix
        self._emit = emit

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _WATCHED_KINDS:
            return
        raw = getattr(event, "dest_path", "") or event.src_path
        path = Path(raw.decode() if isinstance(raw, bytes) else raw)
        if path.name.endswith(self._suffix):
            self._emit(FileChange(kind=event.event_type, path=path))


class DirectoryWatcher:
    """Watch one directory (non-recursive) for changes to ``*<suffix>`` files.

    Usage::

        async for change in DirectoryWatcher(root, ".md").changes():
            ...

    The stream is lazy and unbounded. It can be consumed only once; closing
    or cancelling the consumer stops the underlying observer.
    """

    def __init__(
        self,
        root: Path,
        suffix: str = ".md",
        observer_factory: Callable[[], object] = Observer,
    ) -> None:
        self.root = Path(root)
        self.suffix = suffix
        self._observer_factory = observer_factory
        self._consumed = False

    async def changes(self) -> AsyncGenerator[FileChange, None]:
        if self._consumed:
            raise RuntimeError("DirectoryWatcher streams cannot be restarted")
        self._consumed = True

        if not self.root.is_dir():
            raise WatchSetupError(f"{self.root} is not a directory")

        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[FileChange] = asyncio.Queue()

        def emit(change: FileChange) -> None:
            loop.call_soon_threadsafe(queue.put_nowait, change)

        observer = self._observer_factory()
        try:
            observer.schedule(_SuffixHandler(self.suffix, emit), str(self.root), recursive=False)
            observer.start()
        except Exception as exc:
            raise WatchSetupError(f"cannot watch {self.root}: {exc}") from exc
        logger.info(f"Watching {self.root} for *{self.suffix} changes")

        try:
            while True:
                yield await queue.get()
        finally:
            observer.stop()
            await asyncio.to_thread(observer.join, 5)
            logger.debug(f"Stopped watching {self.root}")
