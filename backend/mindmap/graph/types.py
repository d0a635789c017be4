import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple


logger = logging.getLogger(__name__)


# -------------------------
# Kind vocabularies
# -------------------------

class NodeKind:
    RESOURCE = "resource"
    OPERATION = "operation"
    DATA_OBJECT = "data-object"
    ENTITY = "entity"
    JOIN_TABLE = "join-table"


class LinkKind:
    CONTAINS = "contains"
    RETURNS = "returns"
    ACCEPTS = "accepts"
    REFERENCES = "references"
    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"


# -------------------------
# Graph elements
# -------------------------

@dataclass
class Node:
    id: str
    kind: str
    label: str = ""
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Link:
    source: str
    target: str
    kind: str
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Graph:
    """
    Ordered nodes and links produced by one extraction pass.

    Insertion is append-only. Nodes are unique by id. Links are unique by
    (source, target, kind), or by the unordered {source, target} pair when
    the graph is undirected (schema graphs record each FK pair once).
    """
    nodes: List[Node] = field(default_factory=list)
    links: List[Link] = field(default_factory=list)
    undirected: bool = False

    _node_index: Dict[str, Node] = field(default_factory=dict, init=False, repr=False)
    _link_keys: Set[Tuple] = field(default_factory=set, init=False, repr=False)

    def __post_init__(self):
        for node in self.nodes:
            self._node_index.setdefault(node.id, node)
        for link in self.links:
            self._link_keys.add(self._link_key(link.source, link.target, link.kind))

    def _link_key(self, source: str, target: str, kind: str) -> Tuple:
        if self.undirected:
            return (frozenset((source, target)),)
        return (source, target, kind)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._node_index

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._node_index.get(node_id)

    def has_link(self, source: str, target: str, kind: str = "") -> bool:
        return self._link_key(source, target, kind) in self._link_keys

    def links_from(self, node_id: str) -> List[Link]:
        return [link for link in self.links if link.source == node_id]

    def add_node_if_absent(self, node: Node) -> bool:
        if node.id in self._node_index:
            return False
        self._node_index[node.id] = node
        self.nodes.append(node)
        return True

    def add_link_if_absent(self, link: Link) -> bool:
        # Both ends must already be in the graph
        for end in (link.source, link.target):
            if end not in self._node_index:
                logger.warning(
                    "Refusing %s link %s -> %s: unknown node %s",
                    link.kind, link.source, link.target, end,
                )
                return False

        key = self._link_key(link.source, link.target, link.kind)
        if key in self._link_keys:
            return False
        self._link_keys.add(key)
        self.links.append(link)
        return True

    def is_empty(self) -> bool:
        return not self.nodes and not self.links
