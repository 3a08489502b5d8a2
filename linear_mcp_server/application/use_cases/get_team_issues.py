import logging

from linear_mcp_server.application.ports.linear_port import LinearPort

logger = logging.getLogger(__name__)


class GetTeamIssuesUseCase:
    """팀의 Linear 이슈 목록을 조회하는 Use Case"""

    def __init__(self, linear_port: LinearPort):
        self.linear_port = linear_port

    async def execute(self, team_id: str) -> list[dict]:
        logger.info("👥 GetTeamIssuesUseCase 실행: team=%s", team_id)

        issues = await self.linear_port.get_team_issues(team_id)

        return [
            {
                "id": issue.id,
                "identifier": issue.identifier,
                "title": issue.title,
                "description": issue.description,
                "priority": issue.priority,
                "status": issue.status,
                "assignee": issue.assignee,
                "url": issue.url,
            }
            for issue in issues
        ]
