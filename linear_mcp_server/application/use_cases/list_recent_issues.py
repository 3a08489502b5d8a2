import logging

from linear_mcp_server.application.ports.linear_port import LinearPort

logger = logging.getLogger(__name__)

RECENT_ISSUES_LIMIT = 50


class ListRecentIssuesUseCase:
    """최근 수정된 이슈를 resource 설명 형태로 조회하는 Use Case

    resource 목록에서는 빠졌지만 `linear-recent-issues://` 호환용으로 유지합니다.
    """

    def __init__(self, linear_port: LinearPort):
        self.linear_port = linear_port

    async def execute(self) -> list[dict]:
        issues = await self.linear_port.list_recent_issues(limit=RECENT_ISSUES_LIMIT)
        logger.info("✅ 최근 이슈 조회 완료: %d건", len(issues))

        return [
            {
                "uri": f"linear-issue://{issue.id}",
                "mimeType": "application/json",
                "name": issue.title,
                "description": f"Linear issue {issue.identifier}: {issue.title}",
                "metadata": {
                    "identifier": issue.identifier,
                    "priority": issue.priority,
                    "status": issue.status,
                    "assignee": issue.assignee,
                    "team": issue.team,
                },
            }
            for issue in issues
        ]
