"""Remote URI parsing."""

import re
from typing import Optional

from git_pj.exceptions import GitURIParseError
from git_pj.models.remote import GitIdentity, GitProtocol

# git@<host>:<user>/<repo>.git
SSH_URI_PATTERN = re.compile(r"^git@(?P<host>[^:]+):(?P<user>[^/]+)/(?P<repo>[^/]+)\.git$")
# http(s)://<host>/<user>/<repo>.git
HTTP_URI_PATTERN = re.compile(r"^https?://(?P<host>[^/]+)/(?P<user>[^/]+)/(?P<repo>[^/]+)\.git$")

_PATTERNS = (
    (SSH_URI_PATTERN, GitProtocol.SSH),
    (HTTP_URI_PATTERN, GitProtocol.HTTP),
)


def parse_git_uri(uri: str) -> GitIdentity:
    """Parse an SSH shorthand or HTTP(S) remote into a GitIdentity.

    Only ``git@host:user/repo.git`` and ``http(s)://host/user/repo.git`` are
    accepted. Captured parts are kept verbatim.

    Raises:
        GitURIParseError: for any other form
    """
    for pattern, protocol in _PATTERNS:
        match = pattern.fullmatch(uri)
        if match:
            return GitIdentity(
                hostname=match.group("host"),
                user=match.group("user"),
                repo=match.group("repo"),
                protocol=protocol,
                uri=uri,
            )
    raise GitURIParseError(uri)


def try_parse_git_uri(uri: str) -> Optional[GitIdentity]:
    """Like parse_git_uri, but returns None instead of raising."""
    try:
        return parse_git_uri(uri)
    except GitURIParseError:
        return None
