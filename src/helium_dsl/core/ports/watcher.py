from pathlib import Path
from typing import Protocol


class FileWatcherPort(Protocol):
    """Watches a workspace root and reports changes to Helium source files."""

    @property
    def root(self) -> Path: ...

    async def start(self) -> None: ...

    async def stop(self) -> None: ...
