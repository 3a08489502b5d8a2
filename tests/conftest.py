"""Shared pytest fixtures for linear-mcp-server tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from linear_mcp_server.adapters.outbound.linear_adapter import LinearAdapter
from linear_mcp_server.configuration.container import Container, create_container
from linear_mcp_server.configuration.settings import Settings
from linear_mcp_server.domain.errors import LinearNotFoundError
from linear_mcp_server.domain.linear import (
    CommentDraft,
    IssueChanges,
    IssueDraft,
    IssueSearchFilter,
    LinearComment,
    LinearIssue,
    LinearOrganization,
    LinearTeam,
    LinearUser,
    LinearViewer,
)

VIEWER_ID = "user-viewer"


class FakeLinearPort:
    """In-memory LinearPort. Records every call as (method, payload)."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.issues: dict[str, LinearIssue] = {}
        self.assignees: dict[str, str] = {}
        self.search_responder: Callable[[IssueSearchFilter], list[LinearIssue]] | None = None
        self.fail_with: Exception | None = None
        self._seq = 0

    def add_issue(self, issue: LinearIssue, assignee_id: str | None = None) -> LinearIssue:
        self.issues[issue.id] = issue
        if assignee_id:
            self.assignees[issue.id] = assignee_id
        return issue

    def _record(self, method: str, payload: Any = None) -> None:
        self.calls.append((method, payload))
        if self.fail_with is not None:
            raise self.fail_with

    def _lookup(self, issue_id: str) -> LinearIssue:
        for issue in self.issues.values():
            if issue_id in (issue.id, issue.identifier):
                return issue
        raise LinearNotFoundError(f"Issue {issue_id} not found")

    async def get_issue(self, issue_id: str) -> LinearIssue:
        self._record("get_issue", issue_id)
        return self._lookup(issue_id)

    async def create_issue(self, draft: IssueDraft) -> LinearIssue:
        self._record("create_issue", draft)
        self._seq += 1
        issue = LinearIssue(
            id=f"issue-{self._seq}",
            identifier=f"ENG-{self._seq}",
            title=draft.title,
            url=f"https://linear.app/acme/issue/ENG-{self._seq}",
            description=draft.description,
            priority=draft.priority if draft.priority is not None else 0,
            team="Engineering",
        )
        self.issues[issue.id] = issue
        return issue

    async def update_issue(self, changes: IssueChanges) -> LinearIssue:
        self._record("update_issue", changes)
        issue = self._lookup(changes.id)
        updated = LinearIssue(
            id=issue.id,
            identifier=issue.identifier,
            title=changes.title if changes.title is not None else issue.title,
            url=issue.url,
            description=changes.description if changes.description is not None else issue.description,
            priority=changes.priority if changes.priority is not None else issue.priority,
        )
        self.issues[issue.id] = updated
        return updated

    async def search_issues(
        self,
        search: IssueSearchFilter,
        limit: int = 10,
        include_archived: bool | None = None,
    ) -> list[LinearIssue]:
        self._record("search_issues", {"filter": search, "limit": limit, "include_archived": include_archived})
        if self.search_responder is not None:
            return self.search_responder(search)[:limit]

        results = []
        for issue in self.issues.values():
            if search.priority is not None and issue.priority != search.priority:
                continue
            if search.status and issue.status != search.status:
                continue
            if search.assignee_id and self.assignees.get(issue.id) != search.assignee_id:
                continue
            if search.query and search.query not in issue.title and search.query not in (issue.description or ""):
                continue
            results.append(issue)
        return results[:limit]

    async def get_user_issues(
        self,
        user_id: str | None = None,
        limit: int = 50,
        include_archived: bool | None = None,
    ) -> list[LinearIssue]:
        self._record("get_user_issues", {"user_id": user_id, "limit": limit, "include_archived": include_archived})
        target = user_id or VIEWER_ID
        return [i for i in self.issues.values() if self.assignees.get(i.id) == target][:limit]

    async def add_comment(self, draft: CommentDraft) -> LinearComment:
        self._record("add_comment", draft)
        issue = self._lookup(draft.issue_id)
        return LinearComment(
            id="comment-1",
            body=draft.body,
            url=f"{issue.url}#comment-1",
            issue=issue,
        )

    async def get_team_issues(self, team_id: str) -> list[LinearIssue]:
        self._record("get_team_issues", team_id)
        if team_id != "team-eng":
            raise LinearNotFoundError(f"Team {team_id} not found")
        return list(self.issues.values())

    async def get_viewer(self) -> LinearViewer:
        self._record("get_viewer")
        return LinearViewer(
            id=VIEWER_ID,
            name="Viewer",
            email="viewer@example.com",
            admin=True,
            teams=(LinearTeam(id="team-eng", name="Engineering", key="ENG"),),
            organization=LinearOrganization(id="org-1", name="Acme", url_key="acme"),
        )

    async def get_viewer_id(self) -> str:
        self._record("get_viewer_id")
        return VIEWER_ID

    async def get_organization(self) -> LinearOrganization:
        self._record("get_organization")
        return LinearOrganization(
            id="org-1",
            name="Acme",
            url_key="acme",
            teams=(LinearTeam(id="team-eng", name="Engineering", key="ENG"),),
            users=(LinearUser(id=VIEWER_ID, name="Viewer", email="viewer@example.com", admin=True, active=True),),
        )

    async def list_recent_issues(self, limit: int = 50) -> list[LinearIssue]:
        self._record("list_recent_issues", limit)
        return list(self.issues.values())[:limit]

    async def aclose(self) -> None:
        pass


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_env="test",
        server_name="linear-mcp-test",
        linear_api_key="lin_api_test",
        linear_api_url="https://linear.test/graphql",
        linear_timeout=5.0,
        max_concurrency=4,
    )


@pytest.fixture
def fake_linear() -> FakeLinearPort:
    return FakeLinearPort()


@pytest.fixture
def container(settings: Settings, fake_linear: FakeLinearPort) -> Container:
    return create_container(settings, fake_linear)


class GraphQLStub:
    """httpx.MockTransport handler that answers GraphQL operations by operationName.

    `responses` maps an operation name to either a static response body (dict)
    or a callable taking the request variables and returning a body.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = responses or {}
        self.requests: list[dict[str, Any]] = []
        self.headers: list[httpx.Headers] = []

    def operations(self) -> list[str]:
        return [r["operationName"] for r in self.requests]

    def variables_for(self, operation: str) -> list[dict[str, Any]]:
        return [r["variables"] for r in self.requests if r["operationName"] == operation]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        self.headers.append(request.headers)

        responder = self.responses.get(body["operationName"])
        if responder is None:
            return httpx.Response(200, json={"errors": [{"message": f"unexpected {body['operationName']}"}]})
        if callable(responder):
            responder = responder(body["variables"])
        if isinstance(responder, httpx.Response):
            return responder
        return httpx.Response(200, json=responder)


def make_adapter(stub: Any, max_concurrency: int = 10) -> LinearAdapter:
    return LinearAdapter(
        api_key="lin_api_test",
        api_url="https://linear.test/graphql",
        max_concurrency=max_concurrency,
        transport=httpx.MockTransport(stub),
    )


def issue_node(
    issue_id: str,
    identifier: str,
    title: str,
    *,
    priority: int = 0,
    state_id: str | None = None,
    assignee_id: str | None = None,
    team_id: str | None = None,
    description: str | None = None,
    estimate: float | None = None,
) -> dict[str, Any]:
    return {
        "id": issue_id,
        "identifier": identifier,
        "title": title,
        "description": description,
        "priority": priority,
        "estimate": estimate,
        "url": f"https://linear.app/acme/issue/{identifier}",
        "state": {"id": state_id} if state_id else None,
        "assignee": {"id": assignee_id} if assignee_id else None,
        "team": {"id": team_id} if team_id else None,
    }


def name_lookups(states: dict[str, str] | None = None, users: dict[str, str] | None = None,
                 teams: dict[str, str] | None = None, labels: dict[str, list[str]] | None = None) -> dict[str, Any]:
    """Responders for the related-field lookups the adapter performs per issue."""
    states = states or {}
    users = users or {}
    teams = teams or {}
    labels = labels or {}
    return {
        "WorkflowStateName": lambda v: {"data": {"workflowState": {"id": v["id"], "name": states[v["id"]]}}},
        "UserName": lambda v: {"data": {"user": {"id": v["id"], "name": users[v["id"]]}}},
        "TeamName": lambda v: {"data": {"team": {"id": v["id"], "name": teams[v["id"]]}}},
        "IssueLabels": lambda v: {
            "data": {"issue": {"labels": {"nodes": [{"name": n} for n in labels.get(v["id"], [])]}}}
        },
    }

