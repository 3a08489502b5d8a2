import logging

from linear_mcp_server.application.ports.linear_port import LinearPort

logger = logging.getLogger(__name__)


class GetLinearIssueUseCase:
    """특정 Linear 이슈를 id(또는 identifier)로 조회하는 Use Case"""

    def __init__(self, linear_port: LinearPort):
        self.linear_port = linear_port

    async def execute(self, issue_id: str) -> dict:
        """
        Linear 이슈를 조회합니다.

        Args:
            issue_id: 이슈 id 또는 identifier (예: "ENG-123")

        Returns:
            state/assignee/team 이름이 해석된 이슈 정보 (dict 형식)

        Raises:
            LinearNotFoundError: 이슈가 존재하지 않을 경우
        """
        logger.info("🔍 GetLinearIssueUseCase 실행: %s", issue_id)

        issue = await self.linear_port.get_issue(issue_id)

        return {
            "id": issue.id,
            "identifier": issue.identifier,
            "title": issue.title,
            "description": issue.description,
            "priority": issue.priority,
            "status": issue.status,
            "assignee": issue.assignee,
            "team": issue.team,
            "url": issue.url,
        }
