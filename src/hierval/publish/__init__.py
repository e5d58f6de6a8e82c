"""Partial publishing for localized builds."""

from .invalid_files import InvalidFilesResolver
from .reconciler import PublishManifestReconciler, load_publish_manifest, save_publish_manifest

__all__ = [
    "InvalidFilesResolver",
    "PublishManifestReconciler",
    "load_publish_manifest",
    "save_publish_manifest",
]
