# Graph builders. Each build() call is one independent extraction pass.

from mindmap.scanners.endpoint_scanner import EndpointGraphBuilder, build_endpoint_graph
from mindmap.scanners.schema_scanner import SchemaGraphBuilder, build_schema_graph

__all__ = [
    "EndpointGraphBuilder",
    "SchemaGraphBuilder",
    "build_endpoint_graph",
    "build_schema_graph",
]
