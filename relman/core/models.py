"""Domain records shared by the relman services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import boto3

from .constants import PIPELINE_STATUS_IN_PROGRESS, PIPELINE_STATUS_SUCCEEDED


@dataclass(frozen=True)
class ManagedRepository:
    """A repository tagged to take part in the release process."""

    name: str
    full_name: str
    url: str
    clone_url: str = ""
    default_branch: str = ""
    topics: tuple[str, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ManagedRepository:
        return cls(
            name=data["name"],
            full_name=data["full_name"],
            url=data.get("html_url", ""),
            clone_url=data.get("clone_url", ""),
            default_branch=data.get("default_branch", ""),
            topics=tuple(data.get("topics") or ()),
        )

    def has_topic(self, topic: str) -> bool:
        return topic in self.topics


@dataclass(frozen=True)
class PromotionRequest:
    """A pull request moving code from one environment branch to another."""

    number: int
    url: str
    title: str
    base: str
    head: str
    labels: tuple[str, ...] = ()
    state: str = "open"
    draft: bool = False
    merged: bool = False
    mergeable: bool | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> PromotionRequest:
        # list endpoints carry merged_at but not merged/mergeable
        merged = bool(data.get("merged")) or data.get("merged_at") is not None
        return cls(
            number=data["number"],
            url=data.get("html_url") or data.get("url", ""),
            title=data.get("title", ""),
            base=data.get("base", {}).get("ref", ""),
            head=data.get("head", {}).get("ref", ""),
            labels=tuple(label["name"] for label in data.get("labels") or ()),
            state=data.get("state", "open"),
            draft=bool(data.get("draft")),
            merged=merged,
            mergeable=data.get("mergeable"),
        )

    def has_label(self, release_id: str) -> bool:
        return release_id in self.labels

    @property
    def status(self) -> str:
        if self.merged:
            return "merged"
        if self.state == "closed":
            return "closed-unmerged"
        if self.draft:
            return "draft"
        return "open"


@dataclass(frozen=True)
class SourceRevision:
    action_name: str
    revision_id: str
    revision_url: str = ""


@dataclass(frozen=True)
class PipelineExecutionRecord:
    """Most recent execution of a deployment pipeline. Read-only."""

    execution_id: str
    status: str
    source_revisions: tuple[SourceRevision, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> PipelineExecutionRecord:
        return cls(
            execution_id=data.get("pipelineExecutionId", ""),
            status=data.get("status", ""),
            source_revisions=tuple(
                SourceRevision(
                    action_name=rev.get("actionName", ""),
                    revision_id=rev.get("revisionId", ""),
                    revision_url=rev.get("revisionUrl", ""),
                )
                for rev in data.get("sourceRevisions") or ()
            ),
        )

    @property
    def in_progress(self) -> bool:
        return self.status == PIPELINE_STATUS_IN_PROGRESS

    @property
    def succeeded(self) -> bool:
        return self.status == PIPELINE_STATUS_SUCCEEDED


@dataclass(frozen=True)
class SessionCredential:
    """Short-lived credentials for a single assumed role.

    One instance exists per role per run; operations receive the instance they
    need as an argument.
    """

    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: datetime | None = None
    role_arn: str = ""

    def __repr__(self) -> str:
        return f"SessionCredential(role_arn={self.role_arn!r}, expiration={self.expiration!r})"

    def boto3_session(self, region: str) -> boto3.Session:
        return boto3.Session(
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            aws_session_token=self.session_token,
            region_name=region,
        )
