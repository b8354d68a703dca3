"""File-based persistence for workspace snapshots and route outputs."""

from __future__ import annotations

import json
import logging
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ..config import settings
from ..schemas.planning import WorkspaceSnapshot


class FileStorage:
    """Thin wrapper around the data root for storing JSON snapshots and run outputs."""

    def __init__(self, root: Path | None = None, snapshot_file: str | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.output_root = self.root / "outputs"
        self.output_root.mkdir(parents=True, exist_ok=True)
        self.snapshot_path = self.root / (snapshot_file or settings.snapshot_file)

    def make_run_directory(self, prefix: str = "route") -> Path:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        path = self.output_root / f"{prefix}_{timestamp}"
        path.mkdir(parents=True, exist_ok=False)
        return path

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=indent)

    def read_json(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def save_snapshot(self, snapshot: WorkspaceSnapshot) -> Path:
        # Each writer gets its own sibling temp file; the rename is what publishes it.
        self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.snapshot_path.parent,
            prefix=f"{self.snapshot_path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_path = Path(handle.name)
            try:
                json.dump(snapshot.model_dump(mode="json"), handle, ensure_ascii=False, indent=2)
            except (OSError, TypeError, ValueError):
                handle.close()
                tmp_path.unlink(missing_ok=True)
                raise
        try:
            tmp_path.replace(self.snapshot_path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        return self.snapshot_path

    def load_snapshot(self) -> Optional[WorkspaceSnapshot]:
        if not self.snapshot_path.exists():
            logging.info(f"No workspace snapshot at {self.snapshot_path}; starting empty")
            return None
        return WorkspaceSnapshot.model_validate(self.read_json(self.snapshot_path))
