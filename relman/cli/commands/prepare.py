"""CLI for validating a release before deployment."""

from __future__ import annotations

import logging

import typer

from ...config.settings import get_settings
from ...core.aws_client import PipelineClient
from ...core.constants import ARTIFACTS_SESSION_NAME
from ...core.github_client import GitHubClient
from ...core.identity import IdentityBroker
from ...services.prepare import prepare_release as run_prepare
from ...services.selector import select_repositories
from ..output import abort_on_release_error, finish

logger = logging.getLogger("relman.cli")

app = typer.Typer(add_completion=False)


@app.command()
def prepare_release(
    release_id: str = typer.Option(..., "--id", help="Release identifier (e.g. JIRA release id)"),
    mfa: str = typer.Option(..., "--mfa", prompt="AWS MFA token code", hide_input=True, help="AWS MFA token code"),
    force: bool = typer.Option(False, "--force", help="Merge any open, mergeable release pull requests"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not merge, only report"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
):
    """Check release pull requests are merged and production pipelines run the prod head."""
    s = get_settings()

    with abort_on_release_error():
        broker = IdentityBroker(s.identity_profile, s.aws_region, s.session_duration_seconds)
        artifacts = broker.assume(s.artifact_profile, mfa, ARTIFACTS_SESSION_NAME)

        gh = GitHubClient(token=s.github_token)
        report = run_prepare(
            gh,
            PipelineClient.from_credential(artifacts, s.aws_region),
            select_repositories(gh, org=s.github_org, topic=s.release_topic, visibility=s.visibility.value),
            release_id=release_id,
            org=s.github_org,
            topic=s.release_topic,
            suffix=s.pipeline_suffix,
            provider=s.pipeline_source_provider,
            production_branch=s.production_branch,
            force=force,
            dry_run=dry_run,
        )

    if report.ok:
        logger.info("No issues, you can now continue to run deploy-release")
    else:
        logger.info("Please validate any issues above and rerun this process until you no longer receive this message.")
    finish(report, as_json)
