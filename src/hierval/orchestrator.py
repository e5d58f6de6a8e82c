"""Top-level coordination of one hierarchy validation run."""

import json
import logging
import time
from collections.abc import Callable
from enum import Enum

from hierval.config import DocsetConfig, HiervalConfig
from hierval.constants import DEFAULT_LOCALE, PLUGIN_NAME
from hierval.diagnostics import ErrorCode, LogItem, ValidationLogger
from hierval.hierarchy import generate_hierarchy
from hierval.loader import load_nodes
from hierval.models.hierarchy import RawHierarchy
from hierval.models.node import ContentNode
from hierval.publish import InvalidFilesResolver, PublishManifestReconciler
from hierval.sync import DrySyncClient, HttpLearnServiceAccessor, LearnServiceAccessor
from hierval.utils.git_url import normalize_git_url
from hierval.validation import HierarchyValidator, TokenValidator

logger = logging.getLogger(__name__)


class OrchestratorState(str, Enum):
    """Run states, in order."""
    START = "start"
    STRUCTURALLY_VALIDATED = "structurally_validated"
    DEFAULT_LOCALE_PATH = "default_locale_path"
    OTHER_LOCALE_PATH = "other_locale_path"
    DONE = "done"


class ValidationOrchestrator:
    """Selects and sequences the default-locale or localized workflow."""

    def __init__(
        self,
        config: DocsetConfig,
        validation_logger: ValidationLogger,
        accessor: LearnServiceAccessor | None = None,
        node_source: Callable[[DocsetConfig], list[ContentNode]] | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Docset configuration for this build
            validation_logger: Diagnostics ledger shared by all stages
            accessor: Hierarchy service client; required unless sync is skipped
                      or the build is localized
            node_source: Produces the build's nodes; defaults to reading the
                         node manifest from the docset
        """
        self.config = config
        self.validation_logger = validation_logger
        self.accessor = accessor
        self.node_source = node_source or (
            lambda cfg: load_nodes(cfg.manifest_file_path, cfg.docset_path, cfg.locale)
        )
        self.state = OrchestratorState.START
        self.hierarchy: RawHierarchy | None = None
        self.files_to_delete: set[str] = set()

    def run(self) -> bool:
        """Run the validation and return the overall validity."""
        started = time.perf_counter()
        logger.info(f"[{PLUGIN_NAME}] start to do local validation.")

        nodes = self.node_source(self.config)
        validator = HierarchyValidator(self.validation_logger)
        is_valid, nodes = validator.validate(nodes)
        self.state = OrchestratorState.STRUCTURALLY_VALIDATED

        logger.info(f"[{PLUGIN_NAME}] local validation done in {time.perf_counter() - started:.1f}s")

        if not self.config.is_localization_build:
            self.state = OrchestratorState.DEFAULT_LOCALE_PATH
            result = self.validate_default_locale(is_valid, nodes)
        else:
            self.state = OrchestratorState.OTHER_LOCALE_PATH
            result = self.validate_other_locale(is_valid, nodes)

        self.state = OrchestratorState.DONE
        return result

    def validate_default_locale(self, is_valid: bool, nodes: list[ContentNode]) -> bool:
        """Default locale: structure must pass, then the service must accept it."""
        if not is_valid:
            return False

        self.hierarchy = generate_hierarchy(nodes, self.config.docset_output_path)
        repo_url = normalize_git_url(self.config.repo_url)

        if self.config.no_drysync:
            logger.info("Skipping dry-sync")
            return True

        if self.accessor is None:
            raise ValueError("A service accessor is required when dry-sync is enabled")

        result = DrySyncClient(self.accessor).sync(
            self.config.repo_branch,
            DEFAULT_LOCALE,
            self.config.docset_name,
            repo_url,
            self.hierarchy,
        )

        if not result.is_valid:
            self.validation_logger.error(ErrorCode.DRYSYNC_ERROR, result.message or "Dry-sync rejected the hierarchy")

        return result.is_valid

    def validate_other_locale(self, is_valid: bool, nodes: list[ContentNode]) -> bool:
        """Localized build: validate tokens, then publish the valid subset."""
        token_validator = TokenValidator(
            self.config.dependency_file_path,
            nodes,
            self.config.docset_path,
            self.config.fallback_docset_path,
            self.validation_logger,
        )
        tokens_valid = token_validator.validate()
        is_valid = is_valid and tokens_valid

        resolver = InvalidFilesResolver(nodes, self.validation_logger, token_validator.failed_files)
        self.files_to_delete = resolver.get_files_to_delete()
        self.hierarchy = generate_hierarchy(nodes, self.config.docset_output_path)

        if self.config.publish_file_path:
            PublishManifestReconciler(self.validation_logger).reconcile(
                self.config.publish_file_path,
                self.files_to_delete,
            )
        else:
            logger.warning("No publish file configured; skipping publish manifest reconciliation")

        return is_valid


def run_validation(
    config: HiervalConfig,
    write_log: Callable[[LogItem], None] | None = None,
    accessor: LearnServiceAccessor | None = None,
    validation_logger: ValidationLogger | None = None,
) -> bool:
    """Entry point used by build hosts: validate one docset build.

    Args:
        config: Complete configuration
        write_log: Optional callback receiving every diagnostic
        accessor: Service client; built from ``config.service`` when omitted
        validation_logger: Ledger to record into; a new one is created when omitted

    Returns:
        Overall validity; False must fail the build
    """
    docset = config.docset
    if validation_logger is None:
        validation_logger = ValidationLogger(write_log)

    config_str = json.dumps(docset.model_dump(by_alias=True), indent=2)
    logger.info(f"[{PLUGIN_NAME}] config:\n{config_str}")

    if accessor is None and not docset.is_localization_build and not docset.no_drysync:
        accessor = HttpLearnServiceAccessor(config.service)

    orchestrator = ValidationOrchestrator(docset, validation_logger, accessor)
    return orchestrator.run()
