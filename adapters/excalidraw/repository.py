from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from filelock import FileLock

from adapters.excalidraw.scene import parse_scene
from adapters.filesystem.json_utils import load_json, write_json_atomic
from domain.models import ExcalidrawDocument
from domain.ports.repositories import ExcalidrawRepository


class FileSystemExcalidrawRepository(ExcalidrawRepository):
    def load_by_path(self, path: Path) -> ExcalidrawDocument:
        return parse_scene(load_json(path))

    def load_all(self, directory: Path) -> list[ExcalidrawDocument]:
        return [document for _, document in self.load_all_with_paths(directory)]

    def load_all_with_paths(self, directory: Path) -> list[tuple[Path, ExcalidrawDocument]]:
        return [(path, self.load_by_path(path)) for path in sorted(self._iter_paths(directory))]

    def save(self, document: ExcalidrawDocument, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        lock_path = path.with_suffix(f"{path.suffix}.lock")
        with FileLock(str(lock_path)):
            write_json_atomic(path, document.to_dict())

    def _iter_paths(self, directory: Path) -> Iterable[Path]:
        for pattern in ("*.excalidraw", "*.json"):
            yield from directory.glob(pattern)
