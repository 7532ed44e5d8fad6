"""Hard faults that abort a relman run.

Validation problems (unmerged pull requests, stale pipelines) are not errors:
they are recorded as failed findings on a ``ReleaseReport``.
"""

from __future__ import annotations


class ReleaseError(RuntimeError):
    """Base class for faults that stop the run immediately."""


class AuthenticationError(ReleaseError):
    """The MFA code was rejected or the role/profile could not be resolved."""


class NotFoundError(ReleaseError):
    """A repository, branch or pipeline the run depends on does not exist."""


class TransportError(ReleaseError):
    """An API call to GitHub or AWS failed."""


class GitHubError(TransportError):
    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
