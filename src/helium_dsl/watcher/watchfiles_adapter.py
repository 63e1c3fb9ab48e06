from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine, Iterable
from pathlib import Path
from typing import Any

from watchfiles import Change, awatch

from helium_dsl.config import DEFAULT_FILE_EXTENSION
from helium_dsl.core.languages import is_dsl_file

logger = logging.getLogger(__name__)

PathsCallback = Callable[[set[Path]], Coroutine[Any, Any, None]]


def split_changes(changes: Iterable[tuple[Change, str]], extension: str) -> tuple[set[Path], set[Path]]:
    """Partition a watchfiles batch into (changed, deleted) DSL source paths."""
    changed: set[Path] = set()
    deleted: set[Path] = set()
    for change, raw_path in changes:
        path = Path(raw_path)
        if not is_dsl_file(path, extension):
            continue
        if change == Change.deleted:
            deleted.add(path)
            changed.discard(path)
        else:
            changed.add(path)
            deleted.discard(path)
    return changed, deleted


class WatchfilesWatcher:
    """Watch a workspace for Helium source changes and trigger callbacks.

    Added and modified files go to ``on_change``; deleted files go to
    ``on_delete`` so their index entries can be dropped.

    Implements the ``FileWatcherPort`` protocol.
    """

    def __init__(
        self,
        directory: str | Path,
        on_change: PathsCallback,
        on_delete: PathsCallback | None = None,
        file_extension: str = DEFAULT_FILE_EXTENSION,
    ) -> None:
        self._directory = Path(directory)
        self._on_change = on_change
        self._on_delete = on_delete
        self._file_extension = file_extension
        self._task: asyncio.Task[None] | None = None

    @property
    def root(self) -> Path:
        return self._directory

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watcher started for %s", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Watcher stopped for %s", self._directory)

    async def _watch(self) -> None:
        async for changes in awatch(self._directory):
            changed, deleted = split_changes(changes, self._file_extension)
            if deleted and self._on_delete is not None:
                logger.info("Detected %d deleted file(s)", len(deleted))
                await self._dispatch(self._on_delete, deleted)
            if changed:
                logger.info("Detected changes in %d file(s)", len(changed))
                await self._dispatch(self._on_change, changed)

    @staticmethod
    async def _dispatch(callback: PathsCallback, paths: set[Path]) -> None:
        try:
            await callback(paths)
        except Exception:
            logger.exception("Error in watcher callback")
