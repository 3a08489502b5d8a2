import json
import logging
import sys
import traceback
from collections.abc import Awaitable, Callable

from mcp import types
from mcp.server import Server
from mcp.types import CallToolResult, TextContent
from pydantic import ValidationError

from linear_mcp_server.adapters.inbound.mcp.catalog import TOOLS
from linear_mcp_server.adapters.inbound.mcp.schemas import (
    AddCommentArgs,
    CreateIssueArgs,
    GetUserIssuesArgs,
    SearchIssuesArgs,
    UpdateIssueArgs,
)
from linear_mcp_server.configuration.container import Container
from linear_mcp_server.domain.errors import LinearApiError, LinearNotFoundError, UnsupportedRequestError
from linear_mcp_server.domain.linear import IssueSearchFilter

logger = logging.getLogger(__name__)

# 로그에서 축약할 필드 (긴 본문 텍스트)
_SENSITIVE_FIELDS = {"body", "description"}


def _mask_arguments(arguments: dict) -> dict:
    """로깅용으로 긴 본문 필드를 축약합니다."""
    masked = {}
    for key, value in arguments.items():
        if key in _SENSITIVE_FIELDS and isinstance(value, str) and len(value) > 20:
            masked[key] = f"{value[:20]}... ({len(value)}자)"
        else:
            masked[key] = value
    return masked


def format_issue_list(issues: list[dict]) -> str:
    """검색/사용자 이슈 결과를 한 줄 요약 목록으로 포맷팅합니다. (priority 0은 None으로 표시)"""
    lines = [
        f"- {issue['identifier']}: {issue['title']}\n"
        f"  Priority: {issue.get('priority') or 'None'}\n"
        f"  Status: {issue.get('status') or 'None'}\n"
        f"  {issue['url']}"
        for issue in issues
    ]
    return f"Found {len(issues)} issues:\n" + "\n".join(lines)


async def _create_issue(container: Container, arguments: dict) -> str:
    args = CreateIssueArgs.model_validate(arguments)
    issue = await container.create_issue_use_case.execute(
        title=args.title,
        team_id=args.team_id,
        description=args.description,
        priority=args.priority,
        status=args.status,
    )
    return f"Created issue {issue['identifier']}: {issue['title']}\nURL: {issue['url']}"


async def _update_issue(container: Container, arguments: dict) -> str:
    args = UpdateIssueArgs.model_validate(arguments)
    issue = await container.update_issue_use_case.execute(
        issue_id=args.id,
        title=args.title,
        description=args.description,
        priority=args.priority,
        status=args.status,
    )
    return f"Updated issue {issue['identifier']}\nURL: {issue['url']}"


async def _search_issues(container: Container, arguments: dict) -> str:
    args = SearchIssuesArgs.model_validate(arguments)
    issues = await container.search_issues_use_case.execute(
        IssueSearchFilter(
            query=args.query,
            team_id=args.team_id,
            status=args.status,
            assignee_id=args.assignee_id,
            labels=tuple(args.labels or ()),
            priority=args.priority,
            estimate=args.estimate,
        ),
        limit=args.limit,
        include_archived=args.include_archived,
    )
    return format_issue_list(issues)


async def _get_user_issues(container: Container, arguments: dict) -> str:
    args = GetUserIssuesArgs.model_validate(arguments)
    issues = await container.get_user_issues_use_case.execute(
        user_id=args.user_id,
        limit=args.limit,
        include_archived=args.include_archived,
    )
    return format_issue_list(issues)


async def _add_comment(container: Container, arguments: dict) -> str:
    args = AddCommentArgs.model_validate(arguments)
    result = await container.add_comment_use_case.execute(
        issue_id=args.issue_id,
        body=args.body,
        create_as_user=args.create_as_user,
        display_icon_url=args.display_icon_url,
    )
    identifier = result["issue"]["identifier"] if result["issue"] else args.issue_id
    return f"Added comment to issue {identifier}\nURL: {result['comment']['url']}"


_TOOL_HANDLERS: dict[str, Callable[[Container, dict], Awaitable[str]]] = {
    "linear_create_issue": _create_issue,
    "linear_update_issue": _update_issue,
    "linear_search_issues": _search_issues,
    "linear_get_user_issues": _get_user_issues,
    "linear_add_comment": _add_comment,
}


def _error_payload(error: Exception) -> dict:
    """예외를 호스트가 구분할 수 있는 오류 payload로 변환합니다."""
    if isinstance(error, ValidationError):
        return {
            "type": "VALIDATION_ERROR",
            "message": "Invalid request parameters",
            "details": [
                {
                    "path": list(err["loc"]),
                    "message": err["msg"],
                    "code": "VALIDATION_ERROR",
                }
                for err in error.errors()
            ],
        }
    if isinstance(error, LinearApiError):
        return {
            "type": "LINEAR_API_ERROR",
            "code": "linear_api_error",
            "message": str(error),
            "details": {"status": error.status, "data": error.data},
        }
    if isinstance(error, LinearNotFoundError):
        return {"type": "NOT_FOUND", "message": str(error)}
    if isinstance(error, UnsupportedRequestError):
        return {"type": "UNSUPPORTED_REQUEST", "message": str(error)}
    return {"type": "UNKNOWN_ERROR", "message": str(error)}


def error_result(error: Exception) -> CallToolResult:
    payload = {"error": _error_payload(error)}
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(payload, ensure_ascii=False, default=str))],
        isError=True,
    )


async def call_tool(container: Container, name: str, arguments: dict | None) -> CallToolResult:
    """Tool 호출 하나를 처리합니다. 모든 실패는 isError=True 결과로 변환됩니다."""
    arguments = arguments or {}
    try:
        logger.info("=" * 60)
        logger.info("🔧 Tool 호출: %s", name)
        logger.info("인자: %s", _mask_arguments(arguments))
        logger.info("=" * 60)

        handler = _TOOL_HANDLERS.get(name)
        if handler is None:
            raise UnsupportedRequestError(f"Unknown tool: {name}")

        text = await handler(container, arguments)
        logger.info("✅ Tool 실행 완료: %s", name)
        return CallToolResult(content=[TextContent(type="text", text=text)])

    except ValidationError as e:
        logger.warning("⚠️ Tool 인자 검증 실패 (%s): %d건", name, e.error_count())
        return error_result(e)

    except Exception as e:
        logger.error("=" * 60)
        logger.error("❌ Tool 실행 실패!")
        logger.error("Tool: %s", name)
        logger.error("오류 타입: %s", type(e).__name__)
        logger.error("오류 메시지: %s", str(e))
        logger.error("=" * 60)
        traceback.print_exc(file=sys.stderr)
        return error_result(e)


def register_tools(app: Server, container: Container) -> None:
    """MCP Tool 핸들러를 서버에 등록합니다."""

    @app.list_tools()
    async def list_tools() -> list[types.Tool]:
        return TOOLS

    async def handle_call_tool(req: types.CallToolRequest) -> types.ServerResult:
        result = await call_tool(container, req.params.name, req.params.arguments)
        return types.ServerResult(result)

    # SDK의 call_tool 데코레이터는 결과를 content 목록으로만 감싸므로
    # isError 플래그와 위반 목록을 그대로 돌려주기 위해 요청 핸들러를 직접 등록한다.
    app.request_handlers[types.CallToolRequest] = handle_call_tool
