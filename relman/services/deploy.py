"""Service: promote the application repository through environment branches."""

from __future__ import annotations

import logging

from ..core.aws_client import CodeCommitClient
from ..core.constants import release_title
from ..core.report import ReleaseReport
from ..core.types import Environment

logger = logging.getLogger(__name__)

_CHAINS: dict[Environment, tuple[tuple[str, str], ...]] = {
    Environment.uat: (("stage", "uat"), ("uat", "oa")),
    Environment.production: (("uat", "prod"),),
}


def promotion_chain(environment: Environment) -> tuple[tuple[str, str], ...]:
    return _CHAINS[environment]


def release_to_environment(
    codecommit: CodeCommitClient | None,
    *,
    repository: str,
    release_id: str,
    source: str,
    destination: str,
    force: bool,
    report: ReleaseReport,
    dry_run: bool = False,
) -> None:
    entity = f"{repository}:{source}->{destination}"
    logger.info("Merging codecommit %s -> %s", source, destination)
    if dry_run:
        action = "open and fast-forward merge" if force else "open"
        report.skipped(entity, f"[dry-run] would {action} a pull request")
        return

    pr_id = codecommit.create_pull_request(
        repository, title=release_title(release_id), source=source, destination=destination
    )
    if force:
        logger.info("Merging release...")
        codecommit.merge_by_fast_forward(repository, pr_id)
        report.passed(entity, f"pull request {pr_id} opened and merged")
    else:
        report.passed(entity, f"pull request {pr_id} opened")


def deploy_release(
    codecommit: CodeCommitClient | None,
    environment: Environment,
    *,
    repository: str,
    release_id: str,
    force: bool = False,
    dry_run: bool = False,
) -> ReleaseReport:
    """Run the promotion chain for environment in order.

    Steps do not check each other's result; an API failure in one step raises
    and the remaining steps are not attempted.
    """
    if environment is Environment.uat:
        logger.info("Completing UAT/OA-QA releases")
    else:
        logger.info("Completing production releases")

    report = ReleaseReport()
    for source, destination in promotion_chain(environment):
        release_to_environment(
            codecommit,
            repository=repository,
            release_id=release_id,
            source=source,
            destination=destination,
            force=force,
            report=report,
            dry_run=dry_run,
        )
    return report
