from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))


class FakeFileSystem:
    """In-memory file tree keyed by relative POSIX paths."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files = {Path(p).as_posix(): text for p, text in (files or {}).items()}

    def _dirs(self) -> set[str]:
        dirs = set()
        for p in self.files:
            parent = Path(p).parent
            while parent != Path("."):
                dirs.add(parent.as_posix())
                parent = parent.parent
        return dirs

    def list_dir(self, path) -> list[str]:
        key = Path(path).as_posix()
        if key not in self._dirs():
            raise FileNotFoundError(key)
        children = {Path(p).name for p in set(self.files) | self._dirs() if Path(p).parent.as_posix() == key}
        return sorted(children)

    def is_dir(self, path) -> bool:
        return Path(path).as_posix() in self._dirs()

    def is_file(self, path) -> bool:
        return Path(path).as_posix() in self.files

    def exists(self, path) -> bool:
        return self.is_file(path) or self.is_dir(path)

    def read_text(self, path) -> str:
        try:
            return self.files[Path(path).as_posix()]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write_text(self, path, text: str) -> None:
        self.files[Path(path).as_posix()] = text


@pytest.fixture
def make_fs():
    return FakeFileSystem
