"""
Translate Python type annotations into host-neutral TypeShapes.

This is the only place that touches ``typing`` introspection. Member lists
are produced lazily so that cyclic models (``Node.children: list[Node]``)
are described without recursion; the endpoint builder decides how far to
follow them.
"""

import dataclasses
import enum
import inspect
import logging
import types
import typing
from typing import Any, Dict, List, Optional, Sequence, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from mindmap.ir.shapes import MemberShape, ShapeKind, TypeShape


logger = logging.getLogger(__name__)


SCALAR_TYPES = (str, bytes, bytearray, int, float, complex, bool, type(None), object)

_UNION_TYPES = {typing.Union}
if hasattr(types, "UnionType"):
    _UNION_TYPES.add(types.UnionType)


def describe_type(annotation: Any) -> Optional[TypeShape]:
    """Describe an annotation; returns None when nothing was declared."""
    if annotation is inspect.Parameter.empty or annotation is inspect.Signature.empty:
        return None

    if annotation is None or annotation is type(None):
        return TypeShape(name="None", namespace="builtins", kind=ShapeKind.SCALAR)

    if isinstance(annotation, (str, typing.ForwardRef, typing.TypeVar)) or annotation is typing.Any:
        return TypeShape(name=_annotation_name(annotation), namespace="typing", kind=ShapeKind.SCALAR)

    origin = get_origin(annotation)

    if origin is typing.Annotated:
        return describe_type(get_args(annotation)[0])

    if origin in _UNION_TYPES:
        return _describe_union(annotation)

    if origin is not None:
        return _describe_generic(annotation, origin)

    if isinstance(annotation, type):
        return _describe_class(annotation)

    return TypeShape(name=_annotation_name(annotation), namespace="typing", kind=ShapeKind.SCALAR)


def _describe_union(annotation: Any) -> TypeShape:
    members = [a for a in get_args(annotation) if a is not type(None)]
    if len(members) == 1:
        # Optional[X] behaves as a single-element wrapper
        return TypeShape(
            name="Optional",
            namespace="typing",
            kind=ShapeKind.GENERIC,
            args=[describe_type(members[0])],
        )
    return TypeShape(
        name="Union",
        namespace="typing",
        kind=ShapeKind.GENERIC,
        args=[describe_type(m) for m in members],
    )


def _describe_generic(annotation: Any, origin: Any) -> TypeShape:
    type_arguments = get_args(annotation)
    args = [describe_type(a) for a in type_arguments if a is not Ellipsis]
    args = [a for a in args if a is not None]

    name = getattr(origin, "__name__", None) or _annotation_name(annotation)
    namespace = getattr(origin, "__module__", "") or ""

    loader = None
    if isinstance(origin, type) and not namespace.startswith(("builtins", "typing", "collections")):
        # Members of the closed generic: Envelope[Order].data is an Order
        loader = lambda: public_members(origin, type_arguments)

    key = f"{namespace}.{getattr(origin, '__qualname__', name)}"
    if args:
        key = f"{key}[{', '.join(a.key for a in args)}]"

    return TypeShape(
        name=name,
        namespace=namespace,
        kind=ShapeKind.GENERIC,
        args=args,
        key=key,
        loader=loader,
    )


def _describe_class(cls: type) -> TypeShape:
    namespace = cls.__module__ or ""
    qualname = getattr(cls, "__qualname__", cls.__name__)

    if cls in SCALAR_TYPES or issubclass(cls, enum.Enum):
        return TypeShape(name=cls.__name__, namespace=namespace, kind=ShapeKind.SCALAR)

    return TypeShape(
        name=cls.__name__,
        namespace=namespace,
        kind=ShapeKind.OBJECT,
        key=f"{namespace}.{qualname}",
        loader=lambda: public_members(cls),
    )


def _annotation_name(annotation: Any) -> str:
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, typing.ForwardRef):
        return annotation.__forward_arg__
    return getattr(annotation, "__name__", None) or repr(annotation)


# -------------------------
# Member discovery
# -------------------------

def public_members(cls: type, type_arguments: Sequence[Any] = ()) -> List[MemberShape]:
    """
    Public readable members of a class, in declaration order:
    pydantic fields, dataclass fields or class annotations, then annotated
    properties sorted by name.

    ``type_arguments`` close a generic class: its type parameters are
    replaced by the given arguments in every member annotation.
    """
    substitutions = _substitutions(cls, type_arguments)
    hints = resolve_type_hints(cls)
    annotations: Dict[str, Any] = {}

    if issubclass(cls, BaseModel):
        for name, info in cls.model_fields.items():
            annotations[name] = hints.get(name, info.annotation)
    elif dataclasses.is_dataclass(cls):
        for f in dataclasses.fields(cls):
            annotations[f.name] = hints.get(f.name, f.type)
    else:
        for name, hint in hints.items():
            if get_origin(hint) is typing.ClassVar or hint is typing.ClassVar:
                continue
            annotations[name] = hint

    members = []
    for name, hint in annotations.items():
        if name.startswith("_"):
            continue
        shape = describe_type(_substitute(hint, substitutions))
        if shape is not None:
            members.append(MemberShape(name, shape))

    for name, prop in sorted(_own_properties(cls).items()):
        if name.startswith("_") or name in annotations or prop.fget is None:
            continue
        returns = resolve_type_hints(prop.fget).get("return")
        shape = describe_type(_substitute(returns, substitutions)) if returns is not None else None
        if shape is not None:
            members.append(MemberShape(name, shape))

    return members


def _own_properties(cls: type) -> Dict[str, property]:
    # Properties inherited from BaseModel (model_extra, ...) are not data
    found: Dict[str, property] = {}
    for klass in reversed(cls.__mro__):
        if klass in _FRAMEWORK_BASES:
            continue
        for name, value in vars(klass).items():
            if isinstance(value, property):
                found[name] = value
    return found


_FRAMEWORK_BASES = set(BaseModel.__mro__)


def _substitutions(cls: type, type_arguments: Sequence[Any]) -> Dict[Any, Any]:
    parameters = getattr(cls, "__parameters__", ()) or ()
    if not type_arguments or len(parameters) != len(type_arguments):
        return {}
    return dict(zip(parameters, type_arguments))


def _substitute(hint: Any, substitutions: Dict[Any, Any]) -> Any:
    if not substitutions:
        return hint
    if isinstance(hint, typing.TypeVar):
        return substitutions.get(hint, hint)

    parameters = getattr(hint, "__parameters__", ()) or ()
    if not parameters or get_origin(hint) is None:
        return hint
    try:
        return hint[tuple(substitutions.get(p, p) for p in parameters)]
    except TypeError as exc:
        logger.debug("Cannot close %r over %r: %s", hint, substitutions, exc)
        return hint


def resolve_type_hints(obj: Any) -> Dict[str, Any]:
    try:
        return get_type_hints(obj)
    except (NameError, TypeError, AttributeError) as exc:
        # Unresolvable forward refs: keep what is already evaluated
        logger.debug("Falling back to raw annotations for %r: %s", obj, exc)
        raw = getattr(obj, "__annotations__", {}) or {}
        return {k: v for k, v in raw.items() if not isinstance(v, str)}
