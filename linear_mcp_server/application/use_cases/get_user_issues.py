import logging

from linear_mcp_server.application.ports.linear_port import LinearPort

logger = logging.getLogger(__name__)

DEFAULT_USER_ISSUES_LIMIT = 50


class GetUserIssuesUseCase:
    """사용자에게 할당된 Linear 이슈를 조회하는 Use Case"""

    def __init__(self, linear_port: LinearPort):
        self.linear_port = linear_port

    async def execute(
        self,
        user_id: str | None = None,
        limit: int | None = None,
        include_archived: bool | None = None,
    ) -> list[dict]:
        """
        할당된 이슈를 조회합니다.

        Args:
            user_id: 사용자 ID. None이면 인증된 사용자(viewer)
            limit: 최대 결과 수. None이면 50건
            include_archived: 보관된 이슈 포함 여부

        Returns:
            이슈 목록 (dict 형식)
        """
        logger.info("📋 GetUserIssuesUseCase 실행: user=%s", user_id or "viewer")

        issues = await self.linear_port.get_user_issues(
            user_id=user_id,
            limit=limit or DEFAULT_USER_ISSUES_LIMIT,
            include_archived=include_archived,
        )

        logger.info("✅ Use Case 실행 완료: %d개 이슈 변환", len(issues))

        return [
            {
                "id": issue.id,
                "identifier": issue.identifier,
                "title": issue.title,
                "description": issue.description,
                "priority": issue.priority,
                "status": issue.status,
                "url": issue.url,
            }
            for issue in issues
        ]
