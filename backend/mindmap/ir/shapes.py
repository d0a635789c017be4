import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional


logger = logging.getLogger(__name__)


class ShapeKind(Enum):
    SCALAR = "scalar"    # primitives, str, None, enums, Any, type variables
    GENERIC = "generic"  # parameterized type: outer name + type arguments
    OBJECT = "object"    # a class; members loaded on demand


@dataclass
class MemberShape:
    name: str
    shape: "TypeShape"


@dataclass(eq=False)
class TypeShape:
    """
    Host-neutral description of a reflected type.

    Produced by an adapter over the host's reflection API so that the
    classifier and the builders never touch host type objects. Members are
    loaded lazily through ``loader``; describing a self-referential type
    therefore never recurses.
    """
    name: str
    namespace: str = ""
    kind: ShapeKind = ShapeKind.OBJECT
    args: List["TypeShape"] = field(default_factory=list)
    key: str = ""
    members: Optional[List[MemberShape]] = None
    loader: Optional[Callable[[], List[MemberShape]]] = field(default=None, repr=False)

    def __post_init__(self):
        if not self.key:
            self.key = f"{self.namespace}.{self.name}" if self.namespace else self.name

    def resolve_members(self) -> List[MemberShape]:
        if self.members is None:
            loaded: List[MemberShape] = []
            if self.loader is not None:
                try:
                    loaded = list(self.loader())
                except (NameError, TypeError, AttributeError) as exc:
                    logger.warning("Could not read members of %s: %s", self.key, exc)
            self.members = loaded
        return self.members

    @property
    def display_name(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}[{', '.join(a.display_name for a in self.args)}]"


# -------------------------
# Construction helpers
# -------------------------

def scalar(name: str, namespace: str = "builtins") -> TypeShape:
    return TypeShape(name=name, namespace=namespace, kind=ShapeKind.SCALAR)


def generic(name: str, *args: TypeShape, namespace: str = "typing") -> TypeShape:
    return TypeShape(name=name, namespace=namespace, kind=ShapeKind.GENERIC, args=list(args))


def structure(name: str, namespace: str = "", **members: TypeShape) -> TypeShape:
    return TypeShape(
        name=name,
        namespace=namespace,
        kind=ShapeKind.OBJECT,
        members=[MemberShape(n, s) for n, s in members.items()],
    )
