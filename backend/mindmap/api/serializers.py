from enum import Enum
from typing import Any, Dict, Optional

from mindmap.graph.types import Graph, Link, Node


PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def serialize_value(obj: Any):
    """
    Convert attribute values into JSON-compatible structures.
    Deterministic: dict key order and list order are preserved.
    """
    if isinstance(obj, PRIMITIVE_TYPES):
        return obj

    if isinstance(obj, Enum):
        return serialize_value(obj.value)

    if isinstance(obj, (list, tuple)):
        return [serialize_value(item) for item in obj]

    if isinstance(obj, (set, frozenset)):
        return sorted(serialize_value(item) for item in obj)

    if isinstance(obj, dict):
        return {str(k): serialize_value(v) for k, v in obj.items()}

    # dataclass-like objects
    if hasattr(obj, "__dict__"):
        return {
            key: serialize_value(value)
            for key, value in obj.__dict__.items()
            if not key.startswith("_")
        }

    return str(obj)


def _metadata(attributes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not attributes:
        return None
    return serialize_value(attributes)


def serialize_node(node: Node) -> Dict[str, Any]:
    return {
        "id": node.id,
        "type": node.kind,
        "description": node.label or None,
        "metadata": _metadata(node.attributes),
    }


def serialize_link(link: Link) -> Dict[str, Any]:
    return {
        "source": link.source,
        "target": link.target,
        "type": link.kind or None,
        "metadata": _metadata(link.attributes),
    }


def serialize_graph(graph: Optional[Graph]) -> Dict[str, Any]:
    if graph is None:
        return {"nodes": [], "links": []}
    return {
        "nodes": [serialize_node(node) for node in graph.nodes],
        "links": [serialize_link(link) for link in graph.links],
    }
