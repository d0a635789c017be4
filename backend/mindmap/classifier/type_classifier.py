"""
Type Classifier - decides what a reflected shape contributes to the graph.

Three outcomes:
- UNWRAP: a single-argument generic whose outer name matches a wrapper
  pattern (async results, HTTP results, single-element containers). The
  argument is classified instead.
- SKIP: scalars, shapes from a reserved framework namespace, and shapes
  without public members.
- STRUCTURAL: everything else; becomes a data-object node.

Wrapper detection is structural (name pattern + exactly one argument), so
unfamiliar wrappers such as ``PagedResult[T]`` or ``StreamingResponse[T]``
are unwrapped like the known ones.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Pattern, Sequence

from mindmap.config import DEFAULT_FRAMEWORK_PREFIXES, DEFAULT_MAX_UNWRAP_DEPTH
from mindmap.ir.shapes import ShapeKind, TypeShape


logger = logging.getLogger(__name__)


ASYNC_WRAPPER_PATTERNS = [
    r"Awaitable",
    r"Future",
    r"Task",
    r"AsyncIterable",
    r"AsyncIterator",
]

HTTP_WRAPPER_PATTERNS = [
    r".*Response",
    r".*Result",
]

COLLECTION_WRAPPER_PATTERNS = [
    r"[Ll]ist",
    r"MutableSequence",
    r"Sequence",
    r"[Ss]et",
    r"MutableSet",
    r"AbstractSet",
    r"[Ff]rozen[Ss]et",
    r"Iterable",
    r"Iterator",
    r"Collection",
    r"[Tt]uple",
    r"[Dd]eque",
    r"Optional",
    r"Mapped",
]

DEFAULT_WRAPPER_PATTERNS = (
    ASYNC_WRAPPER_PATTERNS + HTTP_WRAPPER_PATTERNS + COLLECTION_WRAPPER_PATTERNS
)


class Outcome(Enum):
    UNWRAP = "unwrap"
    SKIP = "skip"
    STRUCTURAL = "structural"


@dataclass
class Classification:
    outcome: Outcome
    shape: Optional[TypeShape]
    unwrapped: int = 0

    @property
    def is_structural(self) -> bool:
        return self.outcome == Outcome.STRUCTURAL


class TypeClassifier:
    def __init__(
        self,
        framework_prefixes: Optional[Sequence[str]] = None,
        wrapper_patterns: Optional[Iterable[str]] = None,
        max_unwrap_depth: int = DEFAULT_MAX_UNWRAP_DEPTH,
    ):
        prefixes = DEFAULT_FRAMEWORK_PREFIXES if framework_prefixes is None else framework_prefixes
        self.framework_prefixes = tuple(prefixes)
        patterns = DEFAULT_WRAPPER_PATTERNS if wrapper_patterns is None else list(wrapper_patterns)
        self._wrapper_patterns: List[Pattern] = [re.compile(p) for p in patterns]
        self.max_unwrap_depth = max_unwrap_depth

    @classmethod
    def from_options(cls, options) -> "TypeClassifier":
        return cls(
            framework_prefixes=options.framework_prefixes,
            max_unwrap_depth=options.max_unwrap_depth,
        )

    # -------------------------
    # Individual decisions
    # -------------------------

    def is_wrapper(self, shape: TypeShape) -> bool:
        if shape.kind != ShapeKind.GENERIC or len(shape.args) != 1:
            return False
        return any(p.fullmatch(shape.name) for p in self._wrapper_patterns)

    def is_framework(self, shape: TypeShape) -> bool:
        return bool(shape.namespace) and shape.namespace.startswith(self.framework_prefixes)

    def unwrap(self, shape: TypeShape) -> TypeShape:
        """Strip wrapper layers; shapes that are not wrappers come back unchanged."""
        unwrapped, _ = self._unwrap(shape)
        return unwrapped

    def _unwrap(self, shape: TypeShape):
        depth = 0
        while self.is_wrapper(shape) and depth < self.max_unwrap_depth:
            shape = shape.args[0]
            depth += 1
        return shape, depth

    # -------------------------
    # Classification
    # -------------------------

    def classify(self, shape: Optional[TypeShape]) -> Classification:
        if shape is None:
            return Classification(Outcome.SKIP, None)

        inner, depth = self._unwrap(shape)

        if self.is_wrapper(inner):
            logger.debug("Unwrap depth exceeded for %s", shape.display_name)
            return Classification(Outcome.SKIP, inner, depth)

        if inner.kind == ShapeKind.SCALAR:
            return Classification(Outcome.SKIP, inner, depth)

        if self.is_framework(inner):
            return Classification(Outcome.SKIP, inner, depth)

        if not inner.resolve_members():
            return Classification(Outcome.SKIP, inner, depth)

        return Classification(Outcome.STRUCTURAL, inner, depth)

    def classify_step(self, shape: TypeShape) -> Outcome:
        """Single-step decision, without following wrapper layers."""
        if self.is_wrapper(shape):
            return Outcome.UNWRAP
        return self.classify(shape).outcome
