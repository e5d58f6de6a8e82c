"""Hierarchy validation: structural rules and localized token checks."""

from .framework import NodeSet, RuleFailure, RuleReport, ValidationRule
from .rules import (
    ChildKindRule,
    ChildReferenceRule,
    CycleDetectionRule,
    DuplicateUidRule,
    OrphanUnitRule,
    RequiredFieldsRule,
)
from .structural import HierarchyValidator
from .tokens import TokenValidator

__all__ = [
    "HierarchyValidator",
    "TokenValidator",
    "NodeSet",
    "RuleFailure",
    "RuleReport",
    "ValidationRule",
    "RequiredFieldsRule",
    "DuplicateUidRule",
    "ChildReferenceRule",
    "ChildKindRule",
    "OrphanUnitRule",
    "CycleDetectionRule",
]
