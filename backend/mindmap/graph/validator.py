"""
Graph Validator - Checks the structural invariants of an extracted graph.

Catches issues like:
- Duplicate node IDs
- Links referencing missing nodes
- Duplicate links (per direction and kind, or per pair for undirected graphs)
- Empty labels
- Self-loops and orphaned nodes (informational)

The validator never mutates the graph; callers decide what to do with issues.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from mindmap.graph.types import Graph


logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    ERROR = "error"      # Graph breaks an invariant the renderer relies on
    WARNING = "warning"  # Graph renders but looks wrong
    INFO = "info"        # Expected in some inputs


@dataclass
class ValidationIssue:
    """A single validation issue found in the graph"""
    severity: ValidationSeverity
    code: str
    message: str
    node_id: Optional[str] = None
    link_info: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "node_id": self.node_id,
            "link_info": self.link_info,
        }


@dataclass
class GraphValidationResult:
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    def _count(self, severity: ValidationSeverity) -> int:
        return sum(1 for i in self.issues if i.severity == severity)

    @property
    def error_count(self) -> int:
        return self._count(ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(ValidationSeverity.WARNING)

    @property
    def info_count(self) -> int:
        return self._count(ValidationSeverity.INFO)

    def codes(self) -> Set[str]:
        return {i.code for i in self.issues}

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "info_count": self.info_count,
            "issues": [i.to_dict() for i in self.issues],
            "stats": self.stats,
        }

    def get_summary(self) -> str:
        status = "Valid" if self.is_valid else "Invalid"
        return (
            f"{status} | "
            f"Errors: {self.error_count}, Warnings: {self.warning_count}, Info: {self.info_count}"
        )


class GraphValidator:
    """
    Validates an extracted Graph.

    Usage:
        result = GraphValidator().validate(graph)
        if not result.is_valid:
            for issue in result.issues:
                logger.error("[%s] %s", issue.code, issue.message)
    """

    def validate(self, graph: Graph) -> GraphValidationResult:
        node_ids = {node.id for node in graph.nodes}

        issues: List[ValidationIssue] = []
        issues.extend(self._check_duplicate_node_ids(graph))
        issues.extend(self._check_empty_labels(graph))
        issues.extend(self._check_missing_link_references(graph, node_ids))
        issues.extend(self._check_duplicate_links(graph))
        issues.extend(self._check_self_loops(graph))
        issues.extend(self._check_orphaned_nodes(graph, node_ids))

        is_valid = not any(i.severity == ValidationSeverity.ERROR for i in issues)

        return GraphValidationResult(
            is_valid=is_valid,
            issues=issues,
            stats=self._calculate_stats(graph, node_ids),
        )

    def _check_duplicate_node_ids(self, graph: Graph) -> List[ValidationIssue]:
        issues = []
        seen_ids: Dict[str, int] = defaultdict(int)
        for node in graph.nodes:
            seen_ids[node.id] += 1
        for node_id, count in seen_ids.items():
            if count > 1:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="DUPLICATE_NODE_ID",
                    message=f"Duplicate node ID '{node_id}' appears {count} times",
                    node_id=node_id,
                ))
        return issues

    def _check_empty_labels(self, graph: Graph) -> List[ValidationIssue]:
        issues = []
        for node in graph.nodes:
            if not node.label or not node.label.strip():
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="EMPTY_LABEL",
                    message=f"Node '{node.id}' has empty label",
                    node_id=node.id,
                ))
        return issues

    def _check_missing_link_references(self, graph: Graph, node_ids: Set[str]) -> List[ValidationIssue]:
        issues = []
        for link in graph.links:
            if link.source not in node_ids:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="MISSING_LINK_SOURCE",
                    message=f"Link references non-existent source node '{link.source}'",
                    link_info=f"{link.source} -> {link.target}",
                ))
            if link.target not in node_ids:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="MISSING_LINK_TARGET",
                    message=f"Link references non-existent target node '{link.target}'",
                    link_info=f"{link.source} -> {link.target}",
                ))
        return issues

    def _check_duplicate_links(self, graph: Graph) -> List[ValidationIssue]:
        issues = []
        link_counts: Dict[Tuple, int] = defaultdict(int)
        for link in graph.links:
            if graph.undirected:
                key = tuple(sorted((link.source, link.target)))
            else:
                key = (link.source, link.target, link.kind)
            link_counts[key] += 1
        for key, count in link_counts.items():
            if count > 1:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="DUPLICATE_LINK",
                    message=f"Link {' / '.join(key)} appears {count} times",
                    link_info=f"{key[0]} -> {key[1]}",
                ))
        return issues

    def _check_self_loops(self, graph: Graph) -> List[ValidationIssue]:
        # Self-referencing DTOs and FKs are legitimate
        return [
            ValidationIssue(
                severity=ValidationSeverity.INFO,
                code="SELF_LOOP",
                message=f"Link {link.kind} loops on node '{link.source}'",
                node_id=link.source,
                link_info=f"{link.source} -> {link.target}",
            )
            for link in graph.links
            if link.source == link.target
        ]

    def _check_orphaned_nodes(self, graph: Graph, node_ids: Set[str]) -> List[ValidationIssue]:
        connected: Set[str] = set()
        for link in graph.links:
            connected.add(link.source)
            connected.add(link.target)

        return [
            ValidationIssue(
                severity=ValidationSeverity.INFO,
                code="ORPHANED_NODE",
                message=f"Node '{node.label}' ({node.id}, type={node.kind}) has no connections",
                node_id=node.id,
            )
            for node in graph.nodes
            if node.id not in connected
        ]

    def _calculate_stats(self, graph: Graph, node_ids: Set[str]) -> Dict[str, int]:
        kind_counts: Dict[str, int] = defaultdict(int)
        for node in graph.nodes:
            kind_counts[node.kind] += 1

        connected = set()
        for link in graph.links:
            connected.add(link.source)
            connected.add(link.target)

        stats = {
            "nodes": len(graph.nodes),
            "links": len(graph.links),
            "orphaned_nodes": len(node_ids - connected),
        }
        stats.update(kind_counts)
        return stats


def validate_graph(graph: Graph) -> GraphValidationResult:
    """Convenience function to validate a graph."""
    return GraphValidator().validate(graph)


def log_validation(result: GraphValidationResult, label: str) -> None:
    """Log a validation result: errors loudly, the rest at debug."""
    if result.is_valid:
        logger.debug("%s graph: %s", label, result.get_summary())
        return
    logger.error("%s graph: %s", label, result.get_summary())
    for issue in result.issues:
        if issue.severity == ValidationSeverity.ERROR:
            logger.error("  [%s] %s", issue.code, issue.message)
