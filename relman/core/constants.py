"""Module holding constants used across relman."""

API_BASE = "https://api.github.com"
GITHUB_API_ACCEPT = "application/vnd.github+json"
USER_AGENT = "relman/0.1 (+https://github.com/moxionio)"
HTTP_TIMEOUT_SEC = 30
PER_PAGE = 100

RELEASE_TITLE_PREFIX = "Production Release"
PRODUCTION_BRANCH = "prod"
DEFAULT_BASE_BRANCH = "stage"

SHARED_SESSION_NAME = "moxion-release-shared"
ARTIFACTS_SESSION_NAME = "moxion-release-artifacts"

PIPELINE_STATUS_IN_PROGRESS = "InProgress"
PIPELINE_STATUS_SUCCEEDED = "Succeeded"
SOURCE_ACTION_CATEGORY = "Source"


def release_title(release_id: str) -> str:
    return f"{RELEASE_TITLE_PREFIX} {release_id}"
