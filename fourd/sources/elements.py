"""
Build a graph from element records.

Elements are ``{"data": {...}}`` dicts: nodes carry ``data.id``, edges carry
``data.source`` and ``data.target``. The payload may be a bare list, a dict
with ``elements``, a dict with ``nodes`` + ``edges``, or a single element.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from ..model.graph import Graph
from ..model.vertex import Vertex

logger = logging.getLogger(__name__)


def _is_edge(el: Dict[str, Any]) -> bool:
    d = el.get("data", {})
    return "source" in d and "target" in d


def _safe_float(v: Any, default: float = 1.0) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


def extract_elements(payload: Any) -> List[Dict[str, Any]]:
    if isinstance(payload, list):
        els = payload
    elif isinstance(payload, dict):
        if isinstance(payload.get("elements"), list):
            els = payload["elements"]
        elif ("nodes" in payload or "edges" in payload) and isinstance(payload.get("nodes", []), list) and isinstance(
            payload.get("edges", []), list
        ):
            els = list(payload.get("nodes", [])) + list(payload.get("edges", []))
        elif isinstance(payload.get("data"), dict):
            els = [payload]
        else:
            els = []
    else:
        els = []
    return [el for el in els if isinstance(el, dict) and isinstance(el.get("data"), dict)]


def add_elements(graph: Graph, elements: Iterable[Dict[str, Any]]) -> Dict[str, Vertex]:
    """Add every node, then every edge whose endpoints exist; returns element id -> Vertex."""
    els = list(elements)
    nodes_raw = [e for e in els if not _is_edge(e)]
    edges_raw = [e for e in els if _is_edge(e)]

    by_id: Dict[str, Vertex] = {}
    for n in nodes_raw:
        d = n["data"]
        nid = d.get("id")
        if nid is None or str(nid) in by_id:
            continue
        by_id[str(nid)] = graph.add_vertex(dict(d))

    orphans = 0
    loops = 0
    for e in edges_raw:
        d = e["data"]
        source = by_id.get(str(d.get("source")))
        target = by_id.get(str(d.get("target")))
        if source is None or target is None:
            orphans += 1
            continue
        if source is target and not graph.config.allow_self_loops:
            loops += 1
            continue
        options = dict(d)
        options["directed"] = bool(d.get("directed", False))
        options["strength"] = _safe_float(d.get("strength", d.get("weight", 1.0)))
        graph.add_edge(source, target, options)

    if orphans or loops:
        logger.warning("elements-orphan-edges", extra={"orphans": orphans, "loops": loops})
    logger.info(
        "elements-loaded",
        extra={"vertices": len(by_id), "edges": len(edges_raw) - orphans - loops},
    )
    return by_id


__all__ = ["extract_elements", "add_elements"]
