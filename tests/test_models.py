from conftest import make_pr

from relman.core.models import PipelineExecutionRecord, PromotionRequest, SessionCredential


def test_promotion_request_from_list_payload_uses_merged_at():
    pr = PromotionRequest.from_api({**make_pr(4, labels=["REL-42"], state="closed"), "merged": None,
                                    "merged_at": "2024-02-01T00:00:00Z"})

    assert pr.merged
    assert pr.status == "merged"
    assert pr.has_label("REL-42")
    assert not pr.has_label("rel-42")


def test_promotion_request_status():
    assert PromotionRequest.from_api(make_pr(1)).status == "open"
    assert PromotionRequest.from_api(make_pr(1, draft=True)).status == "draft"
    assert PromotionRequest.from_api(make_pr(1, state="closed")).status == "closed-unmerged"


def test_pipeline_execution_record_from_api():
    record = PipelineExecutionRecord.from_api(
        {
            "pipelineExecutionId": "e-1",
            "status": "InProgress",
            "sourceRevisions": [{"actionName": "Source", "revisionId": "abc", "revisionUrl": "https://x"}],
        }
    )

    assert record.in_progress
    assert not record.succeeded
    assert record.source_revisions[0].revision_id == "abc"


def test_session_credential_repr_hides_secrets():
    cred = SessionCredential("AKIA", "secret", "token", role_arn="arn:aws:iam::1:role/x")

    assert "secret" not in repr(cred)
    assert "token" not in repr(cred)
