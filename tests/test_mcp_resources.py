"""MCP resource reads: URI dispatch, my-* buckets, priority levels, JSON output."""

from __future__ import annotations

import json

import pytest
from mcp import types
from mcp.server import Server

from conftest import VIEWER_ID, FakeLinearPort
from linear_mcp_server.adapters.inbound.mcp.resources import read_resource, register_resources
from linear_mcp_server.adapters.inbound.mcp.tools import call_tool
from linear_mcp_server.configuration.container import Container
from linear_mcp_server.domain.errors import InvalidResourceError, LinearNotFoundError, UnsupportedRequestError
from linear_mcp_server.domain.linear import IssueSearchFilter, LinearIssue


def _issue(n: int, title: str, **kwargs) -> LinearIssue:
    return LinearIssue(
        id=f"issue-{n}",
        identifier=f"ENG-{n}",
        title=title,
        url=f"https://linear.app/acme/issue/ENG-{n}",
        **kwargs,
    )


class TestUriValidation:
    async def test_unsupported_scheme_makes_no_calls(self, container: Container, fake_linear: FakeLinearPort) -> None:
        with pytest.raises(UnsupportedRequestError, match="Unsupported resource URI"):
            await read_resource(container, "github-issue://X-1")
        assert fake_linear.calls == []

    async def test_missing_issue_id_makes_no_calls(self, container: Container, fake_linear: FakeLinearPort) -> None:
        with pytest.raises(InvalidResourceError, match="Issue ID is required"):
            await read_resource(container, "linear-issue://")
        assert fake_linear.calls == []

    async def test_invalid_priority_level(self, container: Container, fake_linear: FakeLinearPort) -> None:
        with pytest.raises(InvalidResourceError, match="Invalid priority level: critical"):
            await read_resource(container, "linear-priority://critical")
        assert fake_linear.calls == []


class TestIssueResources:
    async def test_issue_by_identifier(self, container: Container, fake_linear: FakeLinearPort) -> None:
        fake_linear.add_issue(_issue(1, "Login broken", priority=2, status="Todo", assignee="Ada", team="Engineering"))

        data = json.loads(await read_resource(container, "linear-issue://ENG-1"))

        assert data == {
            "id": "issue-1",
            "identifier": "ENG-1",
            "title": "Login broken",
            "description": None,
            "priority": 2,
            "status": "Todo",
            "assignee": "Ada",
            "team": "Engineering",
            "url": "https://linear.app/acme/issue/ENG-1",
        }

    async def test_missing_issue_propagates(self, container: Container) -> None:
        with pytest.raises(LinearNotFoundError):
            await read_resource(container, "linear-issue://ENG-404")

    async def test_created_issue_is_readable(self, container: Container) -> None:
        await call_tool(container, "linear_create_issue", {"title": "Fix login", "teamId": "team-eng"})

        data = json.loads(await read_resource(container, "linear-issue://issue-1"))

        assert data["identifier"] == "ENG-1"
        assert data["title"] == "Fix login"

    async def test_team_issues(self, container: Container, fake_linear: FakeLinearPort) -> None:
        fake_linear.add_issue(_issue(1, "A"))

        data = json.loads(await read_resource(container, "linear-team://team-eng"))

        assert [i["identifier"] for i in data] == ["ENG-1"]
        assert fake_linear.calls == [("get_team_issues", "team-eng")]

    async def test_search_is_percent_decoded(self, container: Container, fake_linear: FakeLinearPort) -> None:
        fake_linear.add_issue(_issue(1, "login bug"))

        data = json.loads(await read_resource(container, "linear-search://login%20bug"))

        assert [i["identifier"] for i in data] == ["ENG-1"]
        assert fake_linear.calls[0][1]["filter"] == IssueSearchFilter(query="login bug")

    @pytest.mark.parametrize(("level", "priority"), [("urgent", 1), ("high", 2), ("medium", 3), ("low", 4), ("none", 0)])
    async def test_priority_levels(self, container: Container, fake_linear: FakeLinearPort, level: str, priority: int) -> None:
        await read_resource(container, f"linear-priority://{level}")
        assert fake_linear.calls[0][1]["filter"] == IssueSearchFilter(priority=priority)

    async def test_recent_issues_descriptors(self, container: Container, fake_linear: FakeLinearPort) -> None:
        fake_linear.add_issue(_issue(1, "Login broken", priority=1, status="Todo"))

        data = json.loads(await read_resource(container, "linear-recent-issues://"))

        assert data[0]["uri"] == "linear-issue://issue-1"
        assert data[0]["description"] == "Linear issue ENG-1: Login broken"
        assert data[0]["metadata"]["status"] == "Todo"


class TestUserResources:
    async def test_me_means_viewer(self, container: Container, fake_linear: FakeLinearPort) -> None:
        fake_linear.add_issue(_issue(1, "Mine"), assignee_id=VIEWER_ID)

        data = json.loads(await read_resource(container, "linear-user://me"))

        assert [i["identifier"] for i in data] == ["ENG-1"]
        assert fake_linear.calls[0][1]["user_id"] is None

    async def test_specific_user(self, container: Container, fake_linear: FakeLinearPort) -> None:
        await read_resource(container, "linear-user://user-42")
        assert fake_linear.calls[0][1]["user_id"] == "user-42"

    async def test_my_issues(self, container: Container, fake_linear: FakeLinearPort) -> None:
        await read_resource(container, "linear-my-issues://")
        assert fake_linear.calls == [("get_user_issues", {"user_id": None, "limit": 50, "include_archived": None})]

    @pytest.mark.parametrize(
        ("uri", "status"),
        [
            ("linear-my-backlog://", "Backlog"),
            ("linear-my-planned://", "Planned this Cycle"),
            ("linear-my-in-progress://", "In Progress"),
            ("linear-my-under-review://", "Under Review"),
        ],
    )
    async def test_status_buckets(self, container: Container, fake_linear: FakeLinearPort, uri: str, status: str) -> None:
        await read_resource(container, uri)

        assert fake_linear.calls[0] == ("get_viewer_id", None)
        assert fake_linear.calls[1][1]["filter"] == IssueSearchFilter(assignee_id=VIEWER_ID, status=status)

    async def test_high_priority_concatenates_urgent_then_high(
        self, container: Container, fake_linear: FakeLinearPort
    ) -> None:
        by_priority = {
            1: [_issue(1, "Urgent A", priority=1), _issue(2, "Urgent B", priority=1)],
            2: [_issue(3, "High A", priority=2)],
        }
        fake_linear.search_responder = lambda search: by_priority[search.priority]

        data = json.loads(await read_resource(container, "linear-my-high-priority://"))

        assert [i["identifier"] for i in data] == ["ENG-1", "ENG-2", "ENG-3"]
        filters = [payload["filter"] for method, payload in fake_linear.calls if method == "search_issues"]
        assert filters == [
            IssueSearchFilter(assignee_id=VIEWER_ID, priority=1),
            IssueSearchFilter(assignee_id=VIEWER_ID, priority=2),
        ]


class TestWorkspaceResources:
    async def test_viewer(self, container: Container) -> None:
        data = json.loads(await read_resource(container, "linear-viewer://"))

        assert data == {
            "id": VIEWER_ID,
            "name": "Viewer",
            "email": "viewer@example.com",
            "admin": True,
            "teams": [{"id": "team-eng", "name": "Engineering", "key": "ENG"}],
            "organization": {"id": "org-1", "name": "Acme", "urlKey": "acme"},
        }

    async def test_organization(self, container: Container) -> None:
        data = json.loads(await read_resource(container, "linear-organization://"))

        assert data["urlKey"] == "acme"
        assert data["teams"] == [{"id": "team-eng", "name": "Engineering", "key": "ENG"}]
        assert data["users"][0] == {
            "id": VIEWER_ID,
            "name": "Viewer",
            "email": "viewer@example.com",
            "admin": True,
            "active": True,
        }


class TestRegisteredHandlers:
    async def test_catalogs(self, container: Container) -> None:
        app = Server("test")
        register_resources(app, container)

        resources = await app.request_handlers[types.ListResourcesRequest](
            types.ListResourcesRequest(method="resources/list")
        )
        templates = await app.request_handlers[types.ListResourceTemplatesRequest](
            types.ListResourceTemplatesRequest(method="resources/templates/list")
        )

        assert len(resources.root.resources) == 8
        assert "linear-recent-issues://" not in [str(r.uri) for r in resources.root.resources]
        assert [t.uriTemplate for t in templates.root.resourceTemplates] == [
            "linear-issue://{issueId}",
            "linear-team://{teamId}",
            "linear-user://{userId}",
            "linear-search://{query}",
            "linear-priority://{level}",
        ]

    async def test_read_returns_json(self, container: Container, fake_linear: FakeLinearPort) -> None:
        fake_linear.add_issue(_issue(1, "Login broken"))
        app = Server("test")
        register_resources(app, container)

        result = await app.request_handlers[types.ReadResourceRequest](
            types.ReadResourceRequest(
                method="resources/read",
                params=types.ReadResourceRequestParams(uri="linear-issue://issue-1"),
            )
        )

        contents = result.root.contents[0]
        assert contents.mimeType == "application/json"
        assert json.loads(contents.text)["identifier"] == "ENG-1"
