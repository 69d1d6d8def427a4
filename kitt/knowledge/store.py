"""KnowledgeStore - owns the in-memory snapshot of the knowledge base.

Each ``load()`` reads every section file and publishes a brand-new immutable
:class:`KnowledgeSnapshot` with a single reference assignment. Readers call
``snapshot()`` and always see either the previous or the next snapshot in
full, never a mix of both.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import AsyncGenerator, Callable, Iterable, Mapping
from contextlib import aclosing
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from types import MappingProxyType

from loguru import logger

from kitt.knowledge.watcher import DirectoryWatcher, FileChange, WatchSetupError

SECTION_FILES: Mapping[str, str] = MappingProxyType({
    "product": "knowledge-base.md",
    "customers": "customers.md",
    "roadmap": "roadmap.md",
    "priorities": "priorities.md",
    "resources": "resources.md",
    "pmMemory": "pm-memory.md",
})

ChangeStreamFactory = Callable[[Path], AsyncGenerator[FileChange, None]]


class SourceMissingError(FileNotFoundError):
    """A section's backing file does not exist."""

    def __init__(self, section: str, path: Path) -> None:
        super().__init__(f"{path.name} not found for section '{section}'")
        self.section = section
        self.path = path


@dataclass(frozen=True, slots=True)
class KnowledgeSnapshot:
    """Read-only view of every knowledge section at one point in time."""

    sections: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    last_updated: datetime | None = None

    @classmethod
    def empty(cls, names: Iterable[str]) -> KnowledgeSnapshot:
        return cls(sections=MappingProxyType({name: "" for name in names}))

    def __getitem__(self, section: str) -> str:
        return self.sections[section]

    def get(self, section: str, default: str = "") -> str:
        return self.sections.get(section, default)


class KnowledgeStore:
    """Materializes the knowledge-base directory into memory and keeps it fresh."""

    def __init__(
        self,
        root: Path,
        sections: Mapping[str, str] | None = None,
        suffix: str = ".md",
        change_stream: ChangeStreamFactory | None = None,
    ) -> None:
        self.root = Path(root)
        self._files = dict(sections or SECTION_FILES)
        self._suffix = suffix
        self._change_stream = change_stream or self._default_change_stream
        self._snapshot = KnowledgeSnapshot.empty(self._files)
        # Serializes writers only; readers never take it.
        self._load_lock = threading.Lock()

    @property
    def section_names(self) -> list[str]:
        return list(self._files)

    def snapshot(self) -> KnowledgeSnapshot:
        return self._snapshot

    def load(self) -> KnowledgeSnapshot:
        """Read every section file and swap in a fresh snapshot.

        Missing or unreadable files yield an empty section; this never raises
        for a single bad source.
        """
        with self._load_lock:
            logger.info(f"Loading knowledge base from {self.root}")
            sections: dict[str, str] = {}
            for name, filename in self._files.items():
                try:
                    sections[name] = self._read_section(name, self.root / filename)
                except SourceMissingError as exc:
                    logger.warning(f"{exc}, skipping")
                    sections[name] = ""
                except (OSError, UnicodeDecodeError) as exc:
                    logger.error(f"Failed to read {filename}: {exc}")
                    sections[name] = ""
                else:
                    logger.debug(f"Loaded {filename} ({len(sections[name])} chars)")

            snapshot = KnowledgeSnapshot(
                sections=MappingProxyType(sections),
                last_updated=datetime.now(tz=UTC),
            )
            self._snapshot = snapshot
            logger.info(f"Knowledge base loaded at {snapshot.last_updated.isoformat()}")
            return snapshot

    async def watch(self) -> None:
        """Reload on every change under ``root`` until cancelled.

        A watcher that cannot be set up is logged and the store keeps serving
        the last loaded snapshot.
        """
        try:
            async with aclosing(self._change_stream(self.root)) as changes:
                async for change in changes:
                    logger.info(f"Detected {change.kind} in {change.path.name}, reloading knowledge base...")
                    await asyncio.to_thread(self.load)
        except WatchSetupError as exc:
            logger.error(f"Failed to setup file watcher: {exc}")

    # ── internals ───────────────────────────────────────────────────────

    @staticmethod
    def _read_section(section: str, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise SourceMissingError(section, path) from exc

    def _default_change_stream(self, root: Path) -> AsyncGenerator[FileChange, None]:
        return DirectoryWatcher(root, suffix=self._suffix).changes()
