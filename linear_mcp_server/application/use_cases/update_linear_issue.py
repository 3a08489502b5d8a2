import logging

from linear_mcp_server.application.ports.linear_port import LinearPort
from linear_mcp_server.domain.linear import IssueChanges

logger = logging.getLogger(__name__)


class UpdateLinearIssueUseCase:
    """Linear 이슈를 부분 수정하는 Use Case"""

    def __init__(self, linear_port: LinearPort):
        self.linear_port = linear_port

    async def execute(
        self,
        issue_id: str,
        title: str | None = None,
        description: str | None = None,
        priority: int | None = None,
        status: str | None = None,
    ) -> dict:
        """
        지정된 필드만 수정합니다. None인 필드는 전송하지 않습니다.

        Returns:
            수정된 이슈 정보 (dict 형식)
        """
        logger.info("✏️ UpdateLinearIssueUseCase 실행: %s", issue_id)

        issue = await self.linear_port.update_issue(
            IssueChanges(
                id=issue_id,
                title=title,
                description=description,
                priority=priority,
                status=status,
            )
        )

        logger.info("✅ Use Case 실행 완료: %s 수정됨", issue.identifier)

        return {
            "id": issue.id,
            "identifier": issue.identifier,
            "title": issue.title,
            "url": issue.url,
        }
