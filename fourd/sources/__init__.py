from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Union

from ..errors import InvalidArgument
from ..model.graph import Graph
from ..model.vertex import Vertex
from .elements import add_elements, extract_elements
from .syntax import add_syntax_tree


def load_source(graph: Graph, path: Union[str, Path]) -> Dict[object, Vertex]:
    """Populate graph from a .py file (syntax tree) or a .json file (elements)."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidArgument(f"Failed to read source {path}: {exc}") from exc
    suffix = path.suffix.lower()
    if suffix == ".py":
        return add_syntax_tree(graph, text, filename=str(path))
    if suffix == ".json":
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidArgument(f"Failed to parse {path}: {exc}") from exc
        return add_elements(graph, extract_elements(payload))
    raise InvalidArgument(f"Unsupported source type {suffix or '(none)'} for {path}")


__all__ = ["load_source", "add_syntax_tree", "add_elements", "extract_elements"]
