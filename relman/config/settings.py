from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.constants import DEFAULT_BASE_BRANCH, PRODUCTION_BRANCH
from ..core.types import Visibility

# Load .env once, early
load_dotenv()


class Settings(BaseSettings):
    """Release configuration (RELMAN_* env or .env)."""

    model_config = SettingsConfigDict(env_prefix="RELMAN_", env_file=None, extra="ignore")

    github_token: str | None = Field(default_factory=lambda: os.getenv("GITHUB_TOKEN"))
    github_org: str = "moxionio"
    release_topic: str = "managed-release"
    visibility: Visibility = Visibility.private

    production_branch: str = PRODUCTION_BRANCH
    default_base: str = DEFAULT_BASE_BRANCH
    pipeline_suffix: str = "-prod"
    pipeline_source_provider: str = "GitHub"

    aws_region: str = "us-west-2"
    identity_profile: str = "moxion-identity"
    artifact_profile: str = "moxion-artifact-admin"
    shared_profile: str = "moxion-shared-admin"
    session_duration_seconds: int = Field(default=3600, ge=900)

    promotion_repository: str = "moxion_application"


def get_settings() -> Settings:
    return Settings()
