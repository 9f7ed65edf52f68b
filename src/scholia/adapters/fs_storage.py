from pathlib import Path
from typing import Iterable


class FsStorage:
    """Documents are files under one root directory, addressed by relative name."""

    def __init__(self, root: Path, suffix: str = ".org"):
        self.root = root
        self.suffix = suffix

    def _path(self, name: str) -> Path:
        return self.root / name

    def read_raw(self, name: str) -> str | None:
        p = self._path(name)
        return p.read_text(encoding="utf-8") if p.is_file() else None

    def write_raw(self, name: str, contents: str) -> None:
        p = self._path(name)
        p.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps the document's own line endings
        with open(p, "w", encoding="utf-8", newline="") as f:
            f.write(contents)

    def list_all(self) -> Iterable[str]:
        if not self.root.exists():
            return []
        return sorted(p.relative_to(self.root).as_posix() for p in self.root.rglob(f"*{self.suffix}"))
