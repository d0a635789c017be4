import logging
from typing import Iterable, Optional, Set

from mindmap.classifier.type_classifier import TypeClassifier
from mindmap.graph.types import Graph, Link, LinkKind, Node, NodeKind
from mindmap.ir.operations import OperationDescriptor
from mindmap.ir.shapes import TypeShape


logger = logging.getLogger(__name__)


def data_object_node_id(shape: TypeShape) -> str:
    return f"DTO.{shape.name}"


class EndpointGraphBuilder:
    """
    Builds the resource / operation / data-object graph of a web API.

    Every call to ``build`` is an independent extraction pass: it owns a
    fresh Graph and a fresh set of expanded types.
    """

    def __init__(self, classifier: Optional[TypeClassifier] = None):
        self.classifier = classifier or TypeClassifier()

    def build(self, operations: Optional[Iterable[OperationDescriptor]]) -> Graph:
        graph = Graph()
        if operations is None:
            return graph

        expanded: Set[str] = set()
        count = 0
        for operation in operations:
            self._add_operation(graph, operation, expanded)
            count += 1

        logger.info(
            "Endpoint scan: %d operations -> %d nodes, %d links",
            count, len(graph.nodes), len(graph.links),
        )
        return graph

    # -------------------------
    # Per-operation steps
    # -------------------------

    def _add_operation(self, graph: Graph, operation: OperationDescriptor, expanded: Set[str]) -> None:
        resource_id = operation.resource_node_id
        graph.add_node_if_absent(Node(
            id=resource_id,
            kind=NodeKind.RESOURCE,
            label=f"{operation.resource} Controller",
            attributes={"controllerName": operation.resource},
        ))

        operation_id = operation.node_id
        attributes = {
            "httpMethod": operation.http_method,
            "route": operation.route,
            "actionName": operation.name,
        }
        if operation.summary:
            attributes["summary"] = operation.summary
        if operation.tags:
            attributes["tags"] = list(operation.tags)

        inserted = graph.add_node_if_absent(Node(
            id=operation_id,
            kind=NodeKind.OPERATION,
            label=f"{operation.http_method} {operation.name}",
            attributes=attributes,
        ))
        if not inserted:
            # Same id from another descriptor: first one keeps the node
            logger.debug("Operation %s already present, merging links only", operation_id)

        graph.add_link_if_absent(Link(resource_id, operation_id, LinkKind.CONTAINS))

        if operation.return_shape is None:
            logger.debug("Operation %s declares no return shape", operation_id)
        else:
            self._process_shape(graph, operation.return_shape, operation_id, LinkKind.RETURNS, expanded)

        for parameter in operation.parameters:
            if parameter.shape is None:
                continue
            self._process_shape(
                graph, parameter.shape, operation_id, LinkKind.ACCEPTS, expanded,
                attributes={"parameter": parameter.name},
            )

    # -------------------------
    # Recursive expansion
    # -------------------------

    def _process_shape(
        self,
        graph: Graph,
        shape: TypeShape,
        source_id: str,
        kind: str,
        expanded: Set[str],
        attributes: Optional[dict] = None,
    ) -> None:
        classification = self.classifier.classify(shape)
        if not classification.is_structural:
            return

        target = classification.shape
        target_id = data_object_node_id(target)

        if target.key in expanded:
            if graph.has_node(target_id):
                graph.add_link_if_absent(Link(source_id, target_id, kind, dict(attributes or {})))
            return

        expanded.add(target.key)
        graph.add_node_if_absent(Node(
            id=target_id,
            kind=NodeKind.DATA_OBJECT,
            label=target.name,
            attributes={"typeName": target.name, "namespace": target.namespace},
        ))
        graph.add_link_if_absent(Link(source_id, target_id, kind, dict(attributes or {})))

        for member in target.resolve_members():
            self._process_shape(
                graph, member.shape, target_id, LinkKind.REFERENCES, expanded,
                attributes={"member": member.name},
            )


def build_endpoint_graph(
    operations: Optional[Iterable[OperationDescriptor]],
    classifier: Optional[TypeClassifier] = None,
) -> Graph:
    return EndpointGraphBuilder(classifier).build(operations)
