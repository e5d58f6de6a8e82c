"""Core rule framework for structural hierarchy validation.

Rules are pluggable and run exhaustively: every rule sees the whole node set
and records every problem it finds, so one run surfaces all structural issues.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..diagnostics import ErrorCode, ValidationLogger
from ..models.node import ContentNode

logger = logging.getLogger(__name__)


@dataclass
class RuleFailure:
    """A single structural problem found by a rule."""
    rule: str
    code: ErrorCode
    message: str
    file: str | None = None
    uid: str | None = None

    def __str__(self) -> str:
        location = f" in {self.file}" if self.file else ""
        return f"[FAIL] {self.rule}: {self.message}{location}"


@dataclass
class RuleReport:
    """Failures and counters collected across all rules of one run."""
    logger: ValidationLogger
    failures: list[RuleFailure] = field(default_factory=list)
    counters: dict[str, int] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.failures

    @property
    def failed_files(self) -> set[str]:
        return {failure.file for failure in self.failures if failure.file}

    def fail(self, rule: str, code: ErrorCode, message: str, node: ContentNode | None = None) -> None:
        """Record a failure and forward it to the diagnostics logger."""
        file = node.source_path if node else None
        uid = node.uid if node else None
        self.failures.append(RuleFailure(rule, code, message, file, uid))
        self.logger.error(code, message, file=file)

    def increment_counter(self, name: str, value: int = 1) -> None:
        """Increment a counter."""
        self.counters[name] = self.counters.get(name, 0) + value


@dataclass
class NodeSet:
    """Indexed view over the nodes of one validation pass."""
    nodes: list[ContentNode]
    by_uid: dict[str, list[ContentNode]] = field(default_factory=dict)
    parents: dict[str, list[str]] = field(default_factory=dict)  # child uid -> parent uids

    @classmethod
    def build(cls, nodes: list[ContentNode]) -> "NodeSet":
        """Index nodes by uid and record parent links."""
        node_set = cls(list(nodes))

        for node in node_set.nodes:
            if node.uid:
                node_set.by_uid.setdefault(node.uid, []).append(node)

        for node in node_set.nodes:
            if not node.uid:
                continue
            for child in node.children:
                parents = node_set.parents.setdefault(child, [])
                if node.uid not in parents:
                    parents.append(node.uid)

        return node_set

    def resolve(self, uid: str) -> ContentNode | None:
        """Return the node for ``uid`` if it resolves to exactly one node."""
        matches = self.by_uid.get(uid, [])
        return matches[0] if len(matches) == 1 else None


class ValidationRule(ABC):
    """Base class for structural validation rules."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Rule name for identification."""
        pass

    @abstractmethod
    def validate(self, node_set: NodeSet, report: RuleReport) -> None:
        """Execute validation rule.

        Args:
            node_set: Indexed nodes of the current pass
            report: Report to record failures and counters on
        """
        pass
