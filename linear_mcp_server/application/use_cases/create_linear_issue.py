import logging

from linear_mcp_server.application.ports.linear_port import LinearPort
from linear_mcp_server.domain.linear import IssueDraft

logger = logging.getLogger(__name__)


class CreateLinearIssueUseCase:
    """Linear 이슈를 생성하는 Use Case"""

    def __init__(self, linear_port: LinearPort):
        self.linear_port = linear_port

    async def execute(
        self,
        title: str,
        team_id: str,
        description: str | None = None,
        priority: int | None = None,
        status: str | None = None,
    ) -> dict:
        """
        Linear 이슈를 생성합니다.

        Args:
            title: 이슈 제목
            team_id: 팀 ID
            description: 설명 (생략 가능)
            priority: 우선순위 0~4 (생략 가능)
            status: workflow state id로 그대로 전달됨 (이름 → id 변환 없음)

        Returns:
            생성된 이슈 정보 (dict 형식)
        """
        logger.info("📝 CreateLinearIssueUseCase 실행: team=%s, title=%s", team_id, title)

        issue = await self.linear_port.create_issue(
            IssueDraft(
                title=title,
                team_id=team_id,
                description=description,
                priority=priority,
                status=status,
            )
        )

        logger.info("✅ Use Case 실행 완료: %s 생성됨", issue.identifier)

        return {
            "id": issue.id,
            "identifier": issue.identifier,
            "title": issue.title,
            "url": issue.url,
        }
