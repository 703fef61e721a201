from __future__ import annotations

from pathlib import Path
from typing import Union

from .model import MeshModel


PathLike = Union[str, Path]


def load_json(path: PathLike) -> MeshModel:
    return MeshModel.from_json(Path(path).read_text(encoding="utf-8"))


def save_json(model: MeshModel, path: PathLike) -> None:
    Path(path).write_text(model.to_json(), encoding="utf-8")
