"""Service: confirm release pull requests are merged and production pipelines are current."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from ..core.aws_client import PipelineClient
from ..core.constants import PRODUCTION_BRANCH, SOURCE_ACTION_CATEGORY
from ..core.errors import NotFoundError
from ..core.github_client import GitHubClient
from ..core.models import ManagedRepository, PromotionRequest
from ..core.report import ReleaseReport

logger = logging.getLogger(__name__)


def classify_pull_request(
    gh: GitHubClient,
    repo: ManagedRepository,
    pr: PromotionRequest,
    *,
    force: bool,
    report: ReleaseReport,
    dry_run: bool = False,
) -> None:
    entity = f"{repo.name}#{pr.number}"
    if pr.merged:
        report.passed(entity, f"PR {pr.url} is merged")
    elif pr.state == "closed":
        report.failed(entity, f"PR {pr.url} was closed without merging, reopen it or remove the label")
    elif pr.draft:
        report.failed(entity, f"PR {pr.url} is draft, please remove or close")
    elif not pr.mergeable:
        report.failed(entity, f"PR {pr.url} is not able to be merged, please validate status")
    elif force:
        if dry_run:
            report.failed(entity, f"[dry-run] PR {pr.url} is able to be merged, would merge")
            return
        gh.merge_pull_request(repo.full_name, pr.number)
        report.failed(entity, f"PR {pr.url} is able to be merged, merging. Rerun this process to validate successful merge")
    else:
        report.failed(
            entity,
            f"PR {pr.url} is not merged. Please manually merge or force merge using this tool "
            "and rerun this process to validate successful merge",
        )


def validate_repository(
    gh: GitHubClient,
    repo: ManagedRepository,
    *,
    release_id: str,
    production_branch: str = PRODUCTION_BRANCH,
    force: bool = False,
    dry_run: bool = False,
) -> ReleaseReport:
    logger.info("Validating status of repository: %s", repo.name)
    report = ReleaseReport()
    pulls = [
        PromotionRequest.from_api(data)
        for data in gh.list_pull_requests(
            repo.full_name, state="all", base=production_branch, sort="created", direction="desc"
        )
    ]
    labeled = [pr for pr in pulls if pr.has_label(release_id)]
    if not labeled:
        report.skipped(repo.name, f"no pull request labeled {release_id}")
        return report

    for listed in labeled:
        # mergeable is only computed on the single pull request endpoint
        pr = PromotionRequest.from_api(gh.get_pull_request(repo.full_name, listed.number))
        classify_pull_request(gh, repo, pr, force=force, report=report, dry_run=dry_run)

    if report.ok:
        logger.info("No issues, continuing")
    else:
        logger.info("Please fix and validate issues and rerun this process")
    return report


def validate_pull_requests(
    gh: GitHubClient,
    repositories: Iterable[ManagedRepository],
    *,
    release_id: str,
    production_branch: str = PRODUCTION_BRANCH,
    force: bool = False,
    dry_run: bool = False,
) -> ReleaseReport:
    """Evaluate every repository; any unmerged labeled pull request fails the report."""
    report = ReleaseReport()
    for repo in repositories:
        report.extend(
            validate_repository(
                gh,
                repo,
                release_id=release_id,
                production_branch=production_branch,
                force=force,
                dry_run=dry_run,
            )
        )
    return report


def source_repositories(pipeline: dict[str, Any], provider: str) -> Iterator[str]:
    """Yield the repository names configured on the pipeline's source actions."""
    for stage in pipeline.get("stages", []):
        for action in stage.get("actions", []):
            type_id = action.get("actionTypeId", {})
            if type_id.get("category") == SOURCE_ACTION_CATEGORY and type_id.get("provider") == provider:
                repo = action.get("configuration", {}).get("Repo")
                if repo:
                    yield repo


def validate_pipeline_execution(
    pipelines: PipelineClient,
    gh: GitHubClient,
    pipeline_name: str,
    repo: ManagedRepository,
    *,
    production_branch: str,
    report: ReleaseReport,
) -> None:
    execution = pipelines.latest_execution(pipeline_name)
    if execution is None:
        report.failed(
            pipeline_name,
            "No pipeline executions, this is not correct. Please validate the pipeline and restart the process",
        )
        return

    head = gh.get_branch_sha(repo.full_name, production_branch)
    for revision in execution.source_revisions:
        logger.info("Source Revision URL: %s at %s", revision.revision_url, revision.revision_id)
        if revision.revision_id.lower() != head.lower():
            report.failed(
                pipeline_name,
                f"Pipeline revision {revision.revision_id} does not match the {production_branch} commit ID {head}",
            )
            return
        logger.info("Pipeline revision matches the %s commit ID", production_branch)

    if execution.in_progress:
        report.failed(
            pipeline_name,
            f"Pipeline {pipeline_name} is currently executing, please wait for this to complete "
            "before retrying the process.",
        )
    elif execution.succeeded:
        report.passed(pipeline_name, f"Pipeline {pipeline_name} has succeeded.")
    else:
        report.failed(
            pipeline_name,
            f"Pipeline {pipeline_name} is currently {execution.status}, please resolve any issues "
            "before retrying the process.",
        )


def validate_pipelines(
    pipelines: PipelineClient,
    gh: GitHubClient,
    *,
    org: str,
    topic: str,
    suffix: str = "-prod",
    provider: str = "GitHub",
    production_branch: str = PRODUCTION_BRANCH,
) -> ReleaseReport:
    """Check every production pipeline sourced from a managed repository deployed the branch head."""
    logger.info("Validating pipelines match expected commit IDs")
    summaries = list(pipelines.list_pipelines())
    if not summaries:
        raise NotFoundError("Issue retrieving pipelines: no pipelines returned")

    report = ReleaseReport()
    for summary in summaries:
        name = summary["name"]
        if not name.lower().endswith(suffix.lower()):
            continue
        for repo_name in source_repositories(pipelines.get_pipeline(name), provider):
            repo = ManagedRepository.from_api(gh.get_repository(f"{org}/{repo_name}"))
            if not repo.has_topic(topic):
                report.skipped(name, f"Skipping repository {repo.url} as it is not a {topic} repository")
                continue
            validate_pipeline_execution(
                pipelines, gh, name, repo, production_branch=production_branch, report=report
            )
    return report


def prepare_release(
    gh: GitHubClient,
    pipelines: PipelineClient,
    repositories: Iterable[ManagedRepository],
    *,
    release_id: str,
    org: str,
    topic: str,
    suffix: str = "-prod",
    provider: str = "GitHub",
    production_branch: str = PRODUCTION_BRANCH,
    force: bool = False,
    dry_run: bool = False,
) -> ReleaseReport:
    report = validate_pull_requests(
        gh,
        repositories,
        release_id=release_id,
        production_branch=production_branch,
        force=force,
        dry_run=dry_run,
    )
    if not report.ok:
        return report

    report.extend(
        validate_pipelines(
            pipelines,
            gh,
            org=org,
            topic=topic,
            suffix=suffix,
            provider=provider,
            production_branch=production_branch,
        )
    )
    return report
