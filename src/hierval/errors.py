"""Exception hierarchy for hierval.

Content problems (broken references, missing tokens) are not exceptions: they
are recorded as diagnostics by the validation logger. The exceptions below are
for conditions that stop the pipeline or that the dry-sync path converts.
"""


class HiervalError(Exception):
    """Base class for all hierval errors."""


class NodeLoadError(HiervalError):
    """Raised when the node manifest or a node file cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load {path}: {reason}")


class ManifestIOError(HiervalError):
    """Raised when the publish manifest cannot be read or written back."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Publish manifest {path}: {reason}")


class ServiceError(HiervalError):
    """Raised by a service accessor when the remote call fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
