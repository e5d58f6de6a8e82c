"""Structural rules for the learning-content hierarchy.

Each rule checks one aspect of the node graph and records every violation.
"""

import logging

from ..diagnostics import ErrorCode
from ..models.node import ALLOWED_CHILD_KINDS, NodeKind
from .framework import NodeSet, RuleReport, ValidationRule

logger = logging.getLogger(__name__)


class RequiredFieldsRule(ValidationRule):
    """Validate that every node carries uid, source path, kind and title."""

    @property
    def name(self) -> str:
        return "required_fields"

    def validate(self, node_set: NodeSet, report: RuleReport) -> None:
        for node in node_set.nodes:
            missing = []
            if not node.uid:
                missing.append("uid")
            if not node.source_path:
                missing.append("sourcePath")
            if node.kind is None:
                missing.append("type")
            if not node.title:
                missing.append("title")

            for field_name in missing:
                report.fail(
                    self.name,
                    ErrorCode.MISSING_FIELD,
                    f"Required field '{field_name}' is missing on {node.label}",
                    node
                )

        report.increment_counter("nodes_checked", len(node_set.nodes))


class DuplicateUidRule(ValidationRule):
    """Validate that uids are unique within the pass."""

    @property
    def name(self) -> str:
        return "duplicate_uid"

    def validate(self, node_set: NodeSet, report: RuleReport) -> None:
        for uid, matches in node_set.by_uid.items():
            if len(matches) < 2:
                continue

            files = ", ".join(sorted(node.source_path or "<unknown>" for node in matches))
            for node in matches:
                report.fail(
                    self.name,
                    ErrorCode.DUPLICATE_UID,
                    f"Uid '{uid}' is defined {len(matches)} times: {files}",
                    node
                )

        report.increment_counter("unique_uids", len(node_set.by_uid))


class ChildReferenceRule(ValidationRule):
    """Validate that every child uid resolves to a node."""

    @property
    def name(self) -> str:
        return "child_reference"

    def validate(self, node_set: NodeSet, report: RuleReport) -> None:
        for node in node_set.nodes:
            for child in node.children:
                if child not in node_set.by_uid:
                    report.fail(
                        self.name,
                        ErrorCode.UNRESOLVED_CHILD,
                        f"Child '{child}' of {node.label} cannot be resolved",
                        node
                    )
                else:
                    report.increment_counter("children_resolved")


class ChildKindRule(ValidationRule):
    """Validate parent/child kinds: paths hold modules, modules hold units."""

    @property
    def name(self) -> str:
        return "child_kind"

    def validate(self, node_set: NodeSet, report: RuleReport) -> None:
        for node in node_set.nodes:
            if node.kind is None:
                continue  # Reported by required_fields

            allowed = ALLOWED_CHILD_KINDS[node.kind]
            for child_uid in node.children:
                child = node_set.resolve(child_uid)
                if child is None or child.kind is None:
                    continue

                if child.kind not in allowed:
                    report.fail(
                        self.name,
                        ErrorCode.INVALID_CHILD_KIND,
                        f"{node.kind.value} {node.label} cannot contain {child.kind.value} '{child_uid}'",
                        node
                    )


class OrphanUnitRule(ValidationRule):
    """Validate that every unit belongs to a module."""

    @property
    def name(self) -> str:
        return "orphan_unit"

    def validate(self, node_set: NodeSet, report: RuleReport) -> None:
        for node in node_set.nodes:
            if node.kind != NodeKind.UNIT or not node.uid:
                continue

            if not node_set.parents.get(node.uid):
                report.fail(
                    self.name,
                    ErrorCode.ORPHAN_UNIT,
                    f"Unit {node.label} is not referenced by any module",
                    node
                )


class CycleDetectionRule(ValidationRule):
    """Detect cycles in the child graph."""

    @property
    def name(self) -> str:
        return "cycle_detection"

    def validate(self, node_set: NodeSet, report: RuleReport) -> None:
        # Build adjacency list over resolvable uids
        graph: dict[str, list[str]] = {}
        for node in node_set.nodes:
            if node.uid:
                graph.setdefault(node.uid, []).extend(
                    child for child in node.children if child in node_set.by_uid
                )

        visited = set()
        rec_stack = set()
        cycles_found = []

        def has_cycle_util(uid: str, path: list[str]) -> None:
            visited.add(uid)
            rec_stack.add(uid)
            path.append(uid)

            for neighbor in graph.get(uid, []):
                if neighbor not in visited:
                    has_cycle_util(neighbor, path.copy())
                elif neighbor in rec_stack:
                    cycle_start = path.index(neighbor)
                    cycles_found.append(path[cycle_start:] + [neighbor])

            rec_stack.remove(uid)

        for uid in graph:
            if uid not in visited:
                has_cycle_util(uid, [])

        report.increment_counter("cycles_detected", len(cycles_found))

        for cycle in cycles_found:
            node = node_set.resolve(cycle[0]) or node_set.by_uid[cycle[0]][0]
            report.fail(
                self.name,
                ErrorCode.CYCLE,
                f"Cycle detected: {' -> '.join(cycle)}",
                node
            )
