from __future__ import annotations

import ast
import logging
from typing import Dict, List, Optional, Tuple

from ..errors import InvalidArgument
from ..model.graph import Graph
from ..model.vertex import Vertex

logger = logging.getLogger(__name__)

# Context and operator nodes are shared singletons in CPython's parser and
# carry no fields of their own.
SKIPPED_NODES = (ast.expr_context, ast.boolop, ast.operator, ast.unaryop, ast.cmpop)


def parse_source(source: str, filename: str = "<source>") -> ast.AST:
    try:
        return ast.parse(source, filename=filename)
    except SyntaxError as exc:
        raise InvalidArgument(f"Could not parse {filename}: {exc.msg} (line {exc.lineno})") from exc


def syntax_nodes(tree: ast.AST) -> List[ast.AST]:
    return [node for node in ast.walk(tree) if not isinstance(node, SKIPPED_NODES)]


def add_syntax_tree(graph: Graph, source: str, filename: str = "<source>") -> Dict[ast.AST, Vertex]:
    """One vertex per syntax node, labelled with its type, and one edge from each child to its parent."""
    tree = parse_source(source, filename)
    vertices: Dict[ast.AST, Vertex] = {}
    stack: List[Tuple[ast.AST, Optional[Vertex]]] = [(tree, None)]
    while stack:
        node, parent = stack.pop()
        if isinstance(node, SKIPPED_NODES):
            continue
        options = {"label": {"text": type(node).__name__}, "kind": "syntax"}
        lineno = getattr(node, "lineno", None)
        if lineno is not None:
            options["lineno"] = lineno
        vertex = graph.add_vertex(options)
        vertices[node] = vertex
        if parent is not None:
            graph.add_edge(vertex, parent)
        for child in reversed(list(ast.iter_child_nodes(node))):
            stack.append((child, vertex))

    logger.info("syntax-tree-loaded", extra={"source_name": filename, "vertices": len(vertices)})
    return vertices


__all__ = ["SKIPPED_NODES", "parse_source", "syntax_nodes", "add_syntax_tree"]
