"""JSON file store with deep-merge writes."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def deep_merge(base: dict, incoming: dict) -> dict:
    """Merge ``incoming`` into a copy of ``base``; nested dicts merge key by key."""
    merged = dict(base)
    for key, value in incoming.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class JsonDatastore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def write(self, data: dict[str, Any]) -> None:
        """Replace the file contents atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=4, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def merge(self, data: dict[str, Any]) -> dict[str, Any]:
        merged = deep_merge(self.read(), data)
        self.write(merged)
        return merged
