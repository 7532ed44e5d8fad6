"""CLI for opening release pull requests across managed repositories."""

from __future__ import annotations

import typer

from ...config.settings import get_settings
from ...core.github_client import GitHubClient
from ...services.initialize import initialize_release as run_initialize
from ...services.selector import select_repositories
from ..output import abort_on_release_error, finish

app = typer.Typer(add_completion=False)


@app.command()
def initialize_release(
    release_id: str = typer.Option(..., "--id", help="Release identifier (e.g. JIRA release id)"),
    repos: list[str] = typer.Option(
        None, "--repos", help="Only prepare these repositories (name or URL); repeatable", show_default=False
    ),
    base: str | None = typer.Option(None, "--base", help="Override base branch name (use for hotfix releases)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report what would be created without writing"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
):
    """Ensure every managed repository has one open pull request labeled with the release id.

    Examples:
      relman initialize-release --id REL-42
      relman initialize-release --id REL-43 --base hotfix --repos app-a
    """
    s = get_settings()
    gh = GitHubClient(token=s.github_token)

    with abort_on_release_error():
        repositories = select_repositories(
            gh,
            org=s.github_org,
            topic=s.release_topic,
            visibility=s.visibility.value,
            only=repos or [],
        )
        report = run_initialize(
            gh,
            repositories,
            release_id=release_id,
            base=base or s.default_base,
            target=s.production_branch,
            dry_run=dry_run,
        )
    finish(report, as_json)
