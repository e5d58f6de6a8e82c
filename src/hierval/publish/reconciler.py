"""Removal of excluded files from the publish manifest."""

import json
import logging
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError

from hierval.diagnostics import ValidationLogger
from hierval.errors import ManifestIOError
from hierval.models.publish import PublishManifest
from hierval.utils.paths import normalize_path

logger = logging.getLogger(__name__)


def load_publish_manifest(manifest_path: Path) -> PublishManifest:
    """Read the publish manifest.

    Raises:
        ManifestIOError: If the file cannot be read or parsed
    """
    try:
        with open(manifest_path, encoding="utf-8") as f:
            data = json.load(f)
        return PublishManifest.model_validate(data)
    except OSError as e:
        raise ManifestIOError(str(manifest_path), f"cannot read: {e}")
    except json.JSONDecodeError as e:
        raise ManifestIOError(str(manifest_path), f"invalid JSON: {e}")
    except ValidationError as e:
        raise ManifestIOError(str(manifest_path), f"unexpected structure: {e}")


def save_publish_manifest(manifest: PublishManifest, manifest_path: Path) -> None:
    """Overwrite the publish manifest in place.

    Raises:
        ManifestIOError: If the file cannot be written
    """
    try:
        with open(manifest_path, "w", encoding="utf-8") as f:
            json.dump(manifest.model_dump(mode="json", by_alias=True), f, ensure_ascii=False)
    except OSError as e:
        raise ManifestIOError(str(manifest_path), f"cannot write: {e}")


class PublishManifestReconciler:
    """Loads, filters, flags and rewrites the publish manifest.

    Assumes exclusive access to the manifest file for the whole
    load-mutate-write sequence. The previous contents are not kept.
    """

    def __init__(self, validation_logger: ValidationLogger | None = None):
        self.validation_logger = validation_logger

    def reconcile(
        self,
        manifest_path: str | Path,
        excluded_paths: set[str],
        error_lookup: Callable[[str], bool] | None = None,
    ) -> PublishManifest:
        """Apply the exclusion set and error flags to the manifest.

        Idempotent: a second run with the same inputs changes nothing.

        Args:
            manifest_path: Location of the publish manifest
            excluded_paths: Source paths to remove
            error_lookup: Whether a source path has recorded errors; defaults
                          to the validation logger's error ledger

        Returns:
            The manifest as written
        """
        manifest_path = Path(manifest_path)
        if error_lookup is None and self.validation_logger is not None:
            error_lookup = self.validation_logger.file_has_error

        manifest = load_publish_manifest(manifest_path)
        excluded = {normalize_path(path) for path in excluded_paths}

        before = len(manifest.files)
        manifest.files = [
            item for item in manifest.files
            if not item.source_path or normalize_path(item.source_path) not in excluded
        ]
        removed = before - len(manifest.files)

        flagged = 0
        if error_lookup is not None:
            for item in manifest.files:
                if not item.has_error and item.source_path and error_lookup(normalize_path(item.source_path)):
                    item.has_error = True
                    flagged += 1

        save_publish_manifest(manifest, manifest_path)
        logger.info(f"Publish manifest {manifest_path}: removed {removed} entries, flagged {flagged} with errors")
        return manifest
