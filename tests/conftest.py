import json
import sys
from pathlib import Path

import pytest

from .repo_root import REPO_ROOT

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


class DatasetTree:
    """Builds a throwaway dataset (images, captions, ratings file) under one root."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def image(self, rel: str, data: bytes = b"\x89PNG-fake", caption: str | None = None) -> Path:
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        if caption is not None:
            path.with_suffix(".txt").write_text(caption, encoding="utf-8")
        return path

    def ratings(self, mapping: dict[str, str], *, bare: bool = False) -> Path:
        from capset_backend.features.ratings import ratings_path

        path = ratings_path(self.root)
        payload = mapping if bare else {"version": 1, "ratings": mapping}
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path


@pytest.fixture
def dataset(tmp_path) -> DatasetTree:
    root = tmp_path / "dataset"
    root.mkdir()
    return DatasetTree(root)


@pytest.fixture
def out_dir(tmp_path) -> Path:
    return tmp_path / "out"
