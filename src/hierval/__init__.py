"""hierval - Hierarchy validation and cross-locale sync for documentation builds.

hierval validates the learning-content hierarchy of a docset, dry-syncs the
default-locale hierarchy with the remote hierarchy service, and removes invalid
content from the publish manifest of localized builds.
"""

__version__ = "0.1.0"
__description__ = "Hierarchy validation and cross-locale sync for documentation builds"

from hierval.config import HiervalConfig

__all__ = [
    "__version__",
    "__description__",
    "HiervalConfig",
]
