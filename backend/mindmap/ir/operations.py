from dataclasses import dataclass, field
from typing import List, Optional

from mindmap.ir.shapes import TypeShape


UNKNOWN_METHOD = "UNKNOWN"


@dataclass
class ParameterDescriptor:
    name: str
    shape: Optional[TypeShape] = None


@dataclass
class OperationDescriptor:
    """One routed operation as read from the host's route table."""
    resource: str
    name: str
    http_method: str = UNKNOWN_METHOD
    route: str = ""
    return_shape: Optional[TypeShape] = None
    parameters: List[ParameterDescriptor] = field(default_factory=list)
    summary: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    @property
    def resource_node_id(self) -> str:
        return f"Controller.{self.resource}"

    @property
    def node_id(self) -> str:
        return f"{self.resource}.{self.name}"
