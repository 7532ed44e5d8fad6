import pytest

from relman.core.errors import NotFoundError, TransportError
from relman.core.models import PipelineExecutionRecord, SourceRevision

ORG = "moxionio"
TOPIC = "managed-release"


def make_repo(name, topics=(TOPIC,)):
    return {
        "name": name,
        "full_name": f"{ORG}/{name}",
        "html_url": f"https://github.com/{ORG}/{name}",
        "clone_url": f"https://github.com/{ORG}/{name}.git",
        "default_branch": "main",
        "topics": list(topics),
    }


def make_pr(number, labels=(), state="open", draft=False, merged=False, mergeable=True, base="prod", head="stage"):
    return {
        "number": number,
        "html_url": f"https://github.com/pr/{number}",
        "title": f"PR {number}",
        "state": state,
        "draft": draft,
        "merged": merged,
        "merged_at": "2024-01-01T00:00:00Z" if merged else None,
        "mergeable": mergeable,
        "labels": [{"name": label} for label in labels],
        "base": {"ref": base},
        "head": {"ref": head},
    }


class FakeGitHub:
    def __init__(self):
        self.repos = {}
        self.pulls = {}
        self.branches = {}
        self.calls = []

    def add_repo(self, name, topics=(TOPIC,), pulls=(), prod_sha=None):
        data = make_repo(name, topics)
        self.repos[data["full_name"]] = data
        self.pulls[data["full_name"]] = list(pulls)
        if prod_sha is not None:
            self.branches[(data["full_name"], "prod")] = prod_sha
        return data

    def search_repositories(self, org, topic, visibility="all"):
        self.calls.append(("search", org, topic, visibility))
        for data in self.repos.values():
            if topic in data["topics"]:
                yield data

    def get_repository(self, full_name):
        if full_name not in self.repos:
            raise NotFoundError(f"Repository {full_name} not found")
        return self.repos[full_name]

    def get_branch_sha(self, full_name, branch):
        try:
            return self.branches[(full_name, branch)]
        except KeyError:
            raise NotFoundError(f"Branch {branch} not found in {full_name}") from None

    def list_pull_requests(self, full_name, state="open", base=None, sort="created", direction="desc"):
        self.calls.append(("list_pulls", full_name, state, base))
        pulls = self.pulls.get(full_name, [])
        return [
            p
            for p in pulls
            if (state == "all" or p["state"] == state) and (base is None or p["base"]["ref"] == base)
        ]

    def get_pull_request(self, full_name, number):
        for p in self.pulls[full_name]:
            if p["number"] == number:
                return p
        raise NotFoundError(f"PR {number} not found")

    def create_pull_request(self, full_name, *, title, head, base, body=""):
        self.calls.append(("create", full_name, title, head, base))
        pr = make_pr(len(self.pulls[full_name]) + 1, base=base, head=head)
        pr["title"] = title
        self.pulls[full_name].append(pr)
        return pr

    def add_labels(self, full_name, number, labels):
        self.calls.append(("label", full_name, number, tuple(labels)))
        pr = self.get_pull_request(full_name, number)
        pr["labels"].extend({"name": label} for label in labels)
        return pr["labels"]

    def merge_pull_request(self, full_name, number, merge_method=None):
        self.calls.append(("merge", full_name, number))
        return {"merged": True}

    def writes(self):
        return [c for c in self.calls if c[0] in ("create", "label", "merge")]


def source_pipeline(*repos, provider="GitHub"):
    return {
        "stages": [
            {
                "name": "Source",
                "actions": [
                    {
                        "name": f"Source-{repo}",
                        "actionTypeId": {"category": "Source", "provider": provider},
                        "configuration": {"Repo": repo, "Branch": "prod"},
                    }
                    for repo in repos
                ],
            },
            {
                "name": "Deploy",
                "actions": [{"name": "Deploy", "actionTypeId": {"category": "Deploy", "provider": "ECS"}}],
            },
        ]
    }


def execution(status, *revision_ids):
    return PipelineExecutionRecord(
        execution_id="exec-1",
        status=status,
        source_revisions=tuple(SourceRevision(action_name="Source", revision_id=r) for r in revision_ids),
    )


class FakePipelines:
    def __init__(self):
        self.definitions = {}
        self.executions = {}

    def add(self, name, definition, latest=None):
        self.definitions[name] = definition
        self.executions[name] = latest

    def list_pipelines(self):
        for name in self.definitions:
            yield {"name": name}

    def get_pipeline(self, name):
        return self.definitions[name]

    def latest_execution(self, name):
        return self.executions.get(name)


class FakeCodeCommit:
    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = fail_on

    def create_pull_request(self, repository, *, title, source, destination):
        if self.fail_on == (source, destination):
            raise TransportError(f"codecommit create_pull_request failed for {source}->{destination}")
        self.calls.append(("create", repository, title, source, destination))
        return f"pr-{len(self.calls)}"

    def merge_by_fast_forward(self, repository, pull_request_id):
        self.calls.append(("merge", repository, pull_request_id))
        return {}


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def pipelines():
    return FakePipelines()


@pytest.fixture
def codecommit():
    return FakeCodeCommit()
