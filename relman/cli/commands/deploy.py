"""CLI for promoting a release across environment branches."""

from __future__ import annotations

import typer

from ...config.settings import get_settings
from ...core.aws_client import CodeCommitClient
from ...core.constants import SHARED_SESSION_NAME
from ...core.identity import IdentityBroker
from ...core.types import Environment
from ...services.deploy import deploy_release as run_deploy
from ..output import abort_on_release_error, finish

app = typer.Typer(add_completion=False)


@app.command()
def deploy_release(
    release_id: str = typer.Option(..., "--id", help="Release identifier (e.g. JIRA release id)"),
    mfa: str = typer.Option(..., "--mfa", prompt="AWS MFA token code", hide_input=True, help="AWS MFA token code"),
    uat: bool = typer.Option(False, "--uat", help="Deploy to UAT and OA-QA"),
    production: bool = typer.Option(False, "--production", help="Deploy to production"),
    force: bool = typer.Option(False, "--force", help="Fast-forward merge the promotion pull requests"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print promotions without calling AWS"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
):
    """Open (and with --force, merge) the promotion pull requests for one environment chain."""
    if uat == production:
        raise typer.BadParameter("Provide exactly one of --uat or --production.")
    environment = Environment.uat if uat else Environment.production
    s = get_settings()

    with abort_on_release_error():
        codecommit: CodeCommitClient | None = None
        if not dry_run:
            broker = IdentityBroker(s.identity_profile, s.aws_region, s.session_duration_seconds)
            shared = broker.assume(s.shared_profile, mfa, SHARED_SESSION_NAME)
            codecommit = CodeCommitClient.from_credential(shared, s.aws_region)
        report = run_deploy(
            codecommit,
            environment,
            repository=s.promotion_repository,
            release_id=release_id,
            force=force,
            dry_run=dry_run,
        )
    finish(report, as_json)
