"""
Export the current layout as a JSON payload for an external renderer.

The payload mirrors what a WebGL front end needs per frame: compact nodes
with positions, edges by vertex id, and a meta block. It is validated against
the bundled ``layout_snapshot`` schema before it is written.
"""
from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..engine import LayoutEngine
from ..errors import InvalidArgument
from ..schema_registry import DEFAULT_REGISTRY

logger = logging.getLogger(__name__)


def _json_safe(value: Dict[str, Any]) -> Dict[str, Any]:
    return json.loads(json.dumps(value, default=str))


def build_snapshot(engine: LayoutEngine, now: Optional[float] = None) -> Dict[str, Any]:
    now = time.time() if now is None else now
    with engine.locked() as graph:
        nodes_out: List[Dict[str, Any]] = []
        for vertex in graph.iter_vertices():
            x, y, z = (float(c) for c in vertex.position)
            nodes_out.append(
                {
                    "id": vertex.id,
                    "x": x,
                    "y": y,
                    "z": z,
                    "edge_count": vertex.edge_count,
                    "metadata": _json_safe(vertex.metadata),
                }
            )

        edges_out: List[Dict[str, Any]] = []
        for edge in graph.iter_edges():
            edges_out.append(
                {
                    "id": edge.id,
                    "source": edge.source.id,
                    "target": edge.target.id,
                    "directed": edge.directed,
                    "strength": float(edge.strength),
                    "multiplicity": graph.multiplicity(edge.source, edge.target),
                    "metadata": _json_safe(edge.metadata),
                }
            )

        return {
            "nodes": nodes_out,
            "edges": edges_out,
            "meta": {
                "built_at": int(now),
                "frame": engine.frame,
                "nodes": len(nodes_out),
                "edges": len(edges_out),
                "center_of_mass": [float(c) for c in engine.center_of_mass],
                "version": engine.version,
            },
        }


def write_snapshot(path: Union[str, Path], payload: Dict[str, Any]) -> Path:
    problems = DEFAULT_REGISTRY.errors("layout_snapshot", payload)
    if problems:
        raise InvalidArgument("Snapshot failed validation: " + "; ".join(problems[:5]))
    try:
        text = json.dumps(payload, indent=2, allow_nan=False)
    except ValueError as exc:
        raise InvalidArgument(f"Snapshot holds non-finite numbers: {exc}") from exc
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text, encoding="utf-8")
    meta = payload["meta"]
    logger.info(
        "snapshot-written",
        extra={"path": str(out_path), "nodes": meta["nodes"], "edges": meta["edges"], "frame": meta["frame"]},
    )
    return out_path


__all__ = ["build_snapshot", "write_snapshot"]
