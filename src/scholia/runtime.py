"""Runtime wiring helper for the CLI and API."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_storage import FsStorage
from .adapters.org_parser import OrgParser
from .config import ScholiaConfig, load_config
from .core.document import Document
from .export.formats import ExportTable, build_export_table


@dataclass
class Runtime:
    """Container for all wired components."""
    config: ScholiaConfig
    parser: OrgParser
    storage: FsStorage
    export_table: ExportTable

    def _split(self, path: Path | str) -> tuple[FsStorage, str]:
        path = Path(path)
        if not path.is_absolute():
            path = self.storage.root / path
        return FsStorage(path.parent, self.storage.suffix), path.name

    def open_document(self, path: Path | str) -> Document | None:
        storage, name = self._split(path)
        raw = storage.read_raw(name)
        if raw is None:
            return None
        return Document(raw, self.parser, name=str(path))

    def save_document(self, document: Document) -> None:
        if document.name is None:
            raise ValueError("Document has no path to save to")
        storage, name = self._split(document.name)
        storage.write_raw(name, document.text)


def build_runtime(
    root: Path | None = None,
    config_path: Path | None = None,
    document_path: Path | None = None,
) -> Runtime:
    """Build and wire all components."""
    config = load_config(config_path=config_path, document_path=document_path)
    return Runtime(
        config=config,
        parser=OrgParser(),
        storage=FsStorage(root or Path.cwd()),
        export_table=build_export_table(config.export),
    )
