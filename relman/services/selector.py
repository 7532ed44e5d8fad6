"""Service: find the repositories taking part in a managed release."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from ..core.github_client import GitHubClient
from ..core.models import ManagedRepository

logger = logging.getLogger(__name__)


def matches_allow_list(repo: ManagedRepository, only: Sequence[str]) -> bool:
    if not only:
        return True  # no filters = match all
    candidates = {repo.name.lower(), repo.url.lower(), repo.clone_url.lower()}
    return any(item.lower() in candidates for item in only)


def select_repositories(
    gh: GitHubClient,
    *,
    org: str,
    topic: str,
    visibility: str = "private",
    only: Sequence[str] = (),
) -> Iterator[ManagedRepository]:
    """Yield the org's repositories tagged with topic.

    Repositories not named in ``only`` (by name or URL, case-insensitive) are
    skipped. Each call queries GitHub again.
    """
    for data in gh.search_repositories(org, topic, visibility):
        repo = ManagedRepository.from_api(data)
        if not matches_allow_list(repo, only):
            logger.info("Skipping repository %s as it is not in the supplied option list", repo.name)
            continue
        yield repo
