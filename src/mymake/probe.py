# probe.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol


@dataclass(frozen=True)
class FileStat:
    exists: bool
    modified_at: Optional[float] = None
    error: Optional[str] = None  # strerror when stat() failed


class FileSystemProbe(Protocol):
    def probe(self, path: str) -> FileStat: ...


class OsFileSystemProbe:
    """Stat paths relative to `root` (the current directory by default)."""

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root) if root is not None else None

    def probe(self, path: str) -> FileStat:
        full = self.root / path if self.root is not None else Path(path)
        try:
            st = os.stat(full)
        except OSError as e:
            return FileStat(exists=False, error=e.strerror or str(e))
        return FileStat(exists=True, modified_at=st.st_mtime)
