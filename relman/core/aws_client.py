"""CodePipeline and CodeCommit operations, each bound to one SessionCredential."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from .errors import TransportError
from .models import PipelineExecutionRecord, SessionCredential

logger = logging.getLogger(__name__)

_C = TypeVar("_C", bound="_AwsClient")


class _AwsClient:
    service = ""

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_credential(cls: type[_C], credential: SessionCredential, region: str) -> _C:
        return cls(credential.boto3_session(region).client(cls.service))

    def _call(self, operation: str, **kwargs: Any) -> Any:
        logger.debug("%s.%s %s", self.service, operation, kwargs)
        try:
            return getattr(self._client, operation)(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise TransportError(f"{self.service} {operation} failed: {e}") from e


class PipelineClient(_AwsClient):
    service = "codepipeline"

    def list_pipelines(self) -> Iterator[dict[str, Any]]:
        token = None
        while True:
            resp = self._call("list_pipelines", **({"nextToken": token} if token else {}))
            yield from resp.get("pipelines", [])
            token = resp.get("nextToken")
            if not token:
                return

    def get_pipeline(self, name: str) -> dict[str, Any]:
        return self._call("get_pipeline", name=name)["pipeline"]

    def latest_execution(self, name: str) -> PipelineExecutionRecord | None:
        resp = self._call("list_pipeline_executions", pipelineName=name, maxResults=1)
        summaries = resp.get("pipelineExecutionSummaries") or []
        return PipelineExecutionRecord.from_api(summaries[0]) if summaries else None


class CodeCommitClient(_AwsClient):
    service = "codecommit"

    def create_pull_request(self, repository: str, *, title: str, source: str, destination: str) -> str:
        resp = self._call(
            "create_pull_request",
            title=title,
            targets=[
                {
                    "repositoryName": repository,
                    "sourceReference": source,
                    "destinationReference": destination,
                }
            ],
        )
        return resp["pullRequest"]["pullRequestId"]

    def merge_by_fast_forward(self, repository: str, pull_request_id: str) -> dict[str, Any]:
        return self._call(
            "merge_pull_request_by_fast_forward",
            pullRequestId=pull_request_id,
            repositoryName=repository,
        )
