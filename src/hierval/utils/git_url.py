"""Repository URL normalization.

The hierarchy service keys docsets by repository URL, so every spelling of the
same remote (scp-style ssh, ssh://, git://, http, credentials embedded, with or
without ``.git``) must collapse to one https form before it is sent.
"""

import re
from urllib.parse import urlsplit, urlunsplit

_SCP_LIKE = re.compile(r"^(?:(?P<user>[^@/]+)@)?(?P<host>[^:/]+):(?P<path>(?!//).+)$")
_AZURE_SSH = re.compile(r"^v3/(?P<org>[^/]+)/(?P<project>[^/]+)/(?P<repo>[^/]+)$")
_VISUALSTUDIO_HOST = re.compile(r"^(?P<org>[^.]+)\.visualstudio\.com$")


def normalize_git_url(url: str) -> str:
    """Collapse a git remote URL to its canonical https form.

    Args:
        url: Remote URL in any of the common git spellings

    Returns:
        ``https://host/path`` with lowercase host, no credentials, no port,
        no trailing slash and no ``.git`` suffix

    Examples:
        >>> normalize_git_url("git@github.com:Org/Repo.git")
        'https://github.com/Org/Repo'
        >>> normalize_git_url("https://user@Org.visualstudio.com/Proj/_git/Repo")
        'https://dev.azure.com/Org/Proj/_git/Repo'
    """
    url = url.strip()
    if not url:
        return url

    if "://" not in url:
        match = _SCP_LIKE.match(url)
        if match:
            url = f"ssh://{match.group('host')}/{match.group('path')}"
        else:
            url = f"https://{url}"

    parts = urlsplit(url)
    host = (parts.hostname or "").lower()
    path = parts.path.strip("/")
    if path.endswith(".git"):
        path = path[:-4]

    if host == "ssh.dev.azure.com":
        azure = _AZURE_SSH.match(path)
        if azure:
            host = "dev.azure.com"
            path = f"{azure.group('org')}/{azure.group('project')}/_git/{azure.group('repo')}"

    vs_match = _VISUALSTUDIO_HOST.match(host)
    if vs_match:
        org = vs_match.group("org")
        # visualstudio.com hosts are lowercased by urlsplit; recover original casing
        original_org = parts.netloc.rsplit("@", 1)[-1].split(".", 1)[0]
        if original_org.lower() == org:
            org = original_org
        host = "dev.azure.com"
        path = f"{org}/{path}"

    return urlunsplit(("https", host, f"/{path}" if path else "", "", ""))
