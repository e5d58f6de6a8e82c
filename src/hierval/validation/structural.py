"""Structural validation of the content-node graph."""

import logging

from ..diagnostics import ErrorCode, ValidationLogger
from ..models.node import ContentNode
from .framework import NodeSet, RuleReport, ValidationRule

logger = logging.getLogger(__name__)


class HierarchyValidator:
    """Runs structural rules over all nodes of one docset/locale build."""

    def __init__(self, validation_logger: ValidationLogger, rules: list[ValidationRule] | None = None):
        self.validation_logger = validation_logger
        self.rules: list[ValidationRule] = []
        self.last_report: RuleReport | None = None

        if rules is None:
            self.create_default_rules()
        else:
            for rule in rules:
                self.add_rule(rule)

    def add_rule(self, rule: ValidationRule) -> None:
        """Add a validation rule."""
        self.rules.append(rule)

    def create_default_rules(self) -> None:
        """Register the standard hierarchy rules."""
        from .rules import (
            ChildKindRule,
            ChildReferenceRule,
            CycleDetectionRule,
            DuplicateUidRule,
            OrphanUnitRule,
            RequiredFieldsRule,
        )

        self.add_rule(RequiredFieldsRule())
        self.add_rule(DuplicateUidRule())
        self.add_rule(ChildReferenceRule())
        self.add_rule(ChildKindRule())
        self.add_rule(OrphanUnitRule())
        self.add_rule(CycleDetectionRule())

    def validate(self, nodes: list[ContentNode]) -> tuple[bool, list[ContentNode]]:
        """Validate the node graph.

        Every rule runs regardless of earlier failures. A rule that raises is
        recorded as a failure of the run and the remaining rules still run.

        Args:
            nodes: All content nodes of the build, in manifest order

        Returns:
            Tuple of (is_valid, nodes in input order)
        """
        node_set = NodeSet.build(nodes)
        report = RuleReport(self.validation_logger)

        logger.info(f"Validating hierarchy of {len(node_set.nodes)} nodes with {len(self.rules)} rules")

        for rule in self.rules:
            logger.debug(f"Executing rule: {rule.name}")
            try:
                rule.validate(node_set, report)
            except Exception as e:
                logger.error(f"Rule {rule.name} failed with error: {e}")
                report.fail(rule.name, ErrorCode.RULE_FAILURE, f"Rule execution failed: {e}")

        self.last_report = report
        logger.info(f"Structural validation found {len(report.failures)} problems")

        return report.is_valid, node_set.nodes
