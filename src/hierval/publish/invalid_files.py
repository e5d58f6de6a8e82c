"""Computes the files a localized build must not publish."""

import logging
from collections import deque

from hierval.diagnostics import STRUCTURAL_CODES, TOKEN_CODES, ErrorCode, ValidationLogger
from hierval.models.node import ContentNode

logger = logging.getLogger(__name__)


class InvalidFilesResolver:
    """Derives the exclusion set from validation failures.

    A node is excluded when it failed structural or token validation, or when
    any of its ancestors is excluded. No published node has an unpublished
    ancestor.
    """

    def __init__(
        self,
        nodes: list[ContentNode],
        validation_logger: ValidationLogger,
        token_failures: set[str] | None = None,
    ):
        self.nodes = nodes
        self.validation_logger = validation_logger
        self.token_failures = token_failures or set()

    def get_invalid_files(self) -> set[str]:
        """Source paths that failed validation themselves."""
        failed = self.validation_logger.files_with_codes(STRUCTURAL_CODES | TOKEN_CODES)
        return failed | self.token_failures

    def get_files_to_delete(self) -> set[str]:
        """Source paths to remove from the publish manifest."""
        invalid_files = self.get_invalid_files()
        excluded = set(invalid_files)

        nodes_by_uid: dict[str, list[ContentNode]] = {}
        for node in self.nodes:
            if node.uid:
                nodes_by_uid.setdefault(node.uid, []).append(node)

        # Seeded with the children of every invalid node, uid or not
        queue = deque(
            (child_uid, node.source_path) for node in self.nodes
            if node.source_path in invalid_files
            for child_uid in node.children
        )
        visited: set[str] = set()

        while queue:
            child_uid, parent_path = queue.popleft()
            if child_uid in visited:
                continue
            visited.add(child_uid)

            for child in nodes_by_uid.get(child_uid, []):
                if child.source_path and child.source_path not in excluded:
                    excluded.add(child.source_path)
                    self.validation_logger.warning(
                        ErrorCode.PARENT_EXCLUDED,
                        f"{child.label} is not published because its parent {parent_path} is invalid",
                        file=child.source_path
                    )
                queue.extend((grandchild, child.source_path) for grandchild in child.children)

        logger.info(f"{len(excluded)} files excluded from publishing ({len(invalid_files)} invalid)")
        return excluded
