"""Path normalization utilities for cross-platform compatibility."""


def normalize_path(path: str) -> str:
    """Convert any path to canonical forward slash format.

    Source paths are compared as strings across the node manifest, the
    dependency manifest and the publish manifest, so all of them go through
    this function first.

    Args:
        path: Path with any separator format

    Returns:
        Path with forward slashes only and no leading "./"

    Examples:
        >>> normalize_path("learn\\\\module-a\\\\index.yml")
        'learn/module-a/index.yml'
        >>> normalize_path("./learn/module-a/index.yml")
        'learn/module-a/index.yml'
    """
    if not path:
        return path

    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized
