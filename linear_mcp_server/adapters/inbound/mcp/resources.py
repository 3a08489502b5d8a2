import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from mcp import types
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from pydantic import AnyUrl

from linear_mcp_server.adapters.inbound.mcp.catalog import RESOURCE_TEMPLATES, RESOURCES
from linear_mcp_server.configuration.container import Container
from linear_mcp_server.domain.linear import IssueSearchFilter
from linear_mcp_server.domain.resources import (
    MY_STATUS_BUCKETS,
    ResourceKind,
    parse_resource_uri,
    resolve_priority_level,
)

logger = logging.getLogger(__name__)

_MIME_TYPE = "application/json"

ResourceHandler = Callable[[Container, str], Awaitable[Any]]


async def _viewer(container: Container, _: str) -> dict:
    return await container.get_viewer_use_case.execute()


async def _organization(container: Container, _: str) -> dict:
    return await container.get_organization_use_case.execute()


async def _my_issues(container: Container, _: str) -> list[dict]:
    return await container.get_user_issues_use_case.execute(user_id=None)


def _my_status_bucket(status: str) -> ResourceHandler:
    async def handler(container: Container, _: str) -> list[dict]:
        return await container.get_my_issues_use_case.execute_by_status(status)
    return handler


async def _my_high_priority(container: Container, _: str) -> list[dict]:
    return await container.get_my_issues_use_case.execute_high_priority()


async def _recent_issues(container: Container, _: str) -> list[dict]:
    return await container.list_recent_issues_use_case.execute()


async def _issue(container: Container, issue_id: str) -> dict:
    return await container.get_issue_use_case.execute(issue_id)


async def _team(container: Container, team_id: str) -> list[dict]:
    return await container.get_team_issues_use_case.execute(team_id)


async def _user(container: Container, user_id: str) -> list[dict]:
    return await container.get_user_issues_use_case.execute(
        user_id=None if user_id == "me" else user_id,
    )


async def _search(container: Container, query: str) -> list[dict]:
    return await container.search_issues_use_case.execute(IssueSearchFilter(query=query))


async def _priority(container: Container, level: str) -> list[dict]:
    priority = resolve_priority_level(level)
    return await container.search_issues_use_case.execute(IssueSearchFilter(priority=priority))


_RESOURCE_HANDLERS: dict[ResourceKind, ResourceHandler] = {
    ResourceKind.VIEWER: _viewer,
    ResourceKind.ORGANIZATION: _organization,
    ResourceKind.MY_ISSUES: _my_issues,
    **{kind: _my_status_bucket(status) for kind, status in MY_STATUS_BUCKETS.items()},
    ResourceKind.MY_HIGH_PRIORITY: _my_high_priority,
    ResourceKind.RECENT_ISSUES: _recent_issues,
    ResourceKind.ISSUE: _issue,
    ResourceKind.TEAM: _team,
    ResourceKind.USER: _user,
    ResourceKind.SEARCH: _search,
    ResourceKind.PRIORITY: _priority,
}


async def read_resource(container: Container, uri: str) -> str:
    """resource URI를 해석하여 JSON 텍스트를 반환합니다.

    URI 형식/scheme/경로 파라미터 검증은 원격 호출 전에 끝나며, 실패 시 예외가 그대로 전파됩니다.
    """
    request = parse_resource_uri(uri)
    logger.info("📦 Resource 조회: %s (param=%r)", request.kind.scheme, request.param)

    try:
        result = await _RESOURCE_HANDLERS[request.kind](container, request.param)
    except Exception as e:
        logger.error("❌ Resource 조회 실패: %s (%s: %s)", uri, type(e).__name__, e)
        raise

    return json.dumps(result, ensure_ascii=False)


def register_resources(app: Server, container: Container) -> None:
    """MCP Resource 핸들러를 서버에 등록합니다."""

    @app.list_resources()
    async def list_resources() -> list[types.Resource]:
        return RESOURCES

    @app.list_resource_templates()
    async def list_resource_templates() -> list[types.ResourceTemplate]:
        return RESOURCE_TEMPLATES

    @app.read_resource()
    async def handle_read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
        text = await read_resource(container, str(uri))
        return [ReadResourceContents(content=text, mime_type=_MIME_TYPE)]
