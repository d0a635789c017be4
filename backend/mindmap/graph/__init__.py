# Graph model shared by the endpoint and schema analyzers

from mindmap.graph.types import Graph, Link, LinkKind, Node, NodeKind
from mindmap.graph.validator import (
    GraphValidationResult,
    GraphValidator,
    ValidationIssue,
    ValidationSeverity,
    validate_graph,
)

__all__ = [
    "Graph",
    "Link",
    "LinkKind",
    "Node",
    "NodeKind",
    "GraphValidationResult",
    "GraphValidator",
    "ValidationIssue",
    "ValidationSeverity",
    "validate_graph",
]
