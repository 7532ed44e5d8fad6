"""Service: open one labeled production pull request per managed repository."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..core.constants import PRODUCTION_BRANCH, release_title
from ..core.github_client import GitHubClient
from ..core.models import ManagedRepository, PromotionRequest
from ..core.report import ReleaseReport

logger = logging.getLogger(__name__)


def find_open_promotion(pulls: list[PromotionRequest], head: str, base: str) -> PromotionRequest | None:
    for pr in pulls:
        if pr.head == head and pr.base == base:
            return pr
    return None


def ensure_release_pull_request(
    gh: GitHubClient,
    repo: ManagedRepository,
    *,
    release_id: str,
    base: str,
    target: str = PRODUCTION_BRANCH,
    report: ReleaseReport,
    dry_run: bool = False,
) -> None:
    """Create the release pull request for repo unless one is already open.

    An open base -> target pull request without the label (left by a run that
    stopped between create and label) is labeled instead of created again;
    GitHub allows a single open pull request per head/base pair.

    The lookup and the creation are separate API calls, so two runs racing on
    the same repository can both create a pull request.
    """
    pulls = [PromotionRequest.from_api(data) for data in gh.list_pull_requests(repo.full_name, state="open")]
    existing = next((pr for pr in pulls if pr.has_label(release_id)), None)
    if existing is not None:
        report.passed(repo.name, f"pull request already exists: {existing.url}")
        return

    unlabeled = find_open_promotion(pulls, head=base, base=target)
    if unlabeled is not None:
        if dry_run:
            report.skipped(repo.name, f"[dry-run] would label {unlabeled.url} with {release_id}")
            return
        logger.info("Open %s -> %s pull request %s is missing the release label... labeling.", base, target, unlabeled.url)
        gh.add_labels(repo.full_name, unlabeled.number, [release_id])
        report.passed(repo.name, f"labeled existing {unlabeled.url}")
        return

    if dry_run:
        report.skipped(repo.name, f"[dry-run] would open {base} -> {target} labeled {release_id}")
        return

    logger.info("Pull request does not exist for %s... creating.", repo.url)
    created = gh.create_pull_request(repo.full_name, title=release_title(release_id), head=base, base=target)
    gh.add_labels(repo.full_name, created["number"], [release_id])
    report.passed(repo.name, f"created {created.get('html_url', '#' + str(created['number']))}")


def initialize_release(
    gh: GitHubClient,
    repositories: Iterable[ManagedRepository],
    *,
    release_id: str,
    base: str,
    target: str = PRODUCTION_BRANCH,
    dry_run: bool = False,
) -> ReleaseReport:
    report = ReleaseReport()
    for repo in repositories:
        ensure_release_pull_request(
            gh, repo, release_id=release_id, base=base, target=target, report=report, dry_run=dry_run
        )
    return report
