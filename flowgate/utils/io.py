# flowgate/utils/io.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

import yaml

PathLike = Union[str, Path]


def write_json(path: PathLike, data: Any, indent: int = 2) -> Path:
    """Write a report atomically, creating the parent directory."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_suffix(p.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=indent)
    tmp.replace(p)
    return p


def load_workflow(path: PathLike) -> Any:
    """Load a workflow document from .json, .yaml or .yml."""
    p = Path(path)
    suffix = p.suffix.lower()
    with p.open("r", encoding="utf-8") as f:
        if suffix == ".json":
            return json.load(f)
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(f)
    raise ValueError(f"Unsupported workflow file type '{suffix}': {p}")
