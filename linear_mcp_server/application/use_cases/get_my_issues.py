import logging

from linear_mcp_server.application.ports.linear_port import LinearPort
from linear_mcp_server.application.use_cases.search_linear_issues import SearchLinearIssuesUseCase
from linear_mcp_server.domain.linear import IssueSearchFilter

logger = logging.getLogger(__name__)

# "높은 우선순위" = urgent(1) 결과 + high(2) 결과 (순서대로 이어 붙임, 중복 제거 없음)
_HIGH_PRIORITY_LEVELS = (1, 2)


class GetMyIssuesUseCase:
    """인증된 사용자에게 할당된 이슈를 상태/우선순위 버킷별로 조회하는 Use Case"""

    def __init__(self, linear_port: LinearPort, search_use_case: SearchLinearIssuesUseCase):
        self.linear_port = linear_port
        self.search_use_case = search_use_case

    async def execute_by_status(self, status: str) -> list[dict]:
        """
        viewer에게 할당되고 workflow state 이름이 status와 정확히 일치하는 이슈를 조회합니다.

        Args:
            status: workflow state 이름 (예: "Backlog", "In Progress")
        """
        viewer_id = await self.linear_port.get_viewer_id()
        logger.info("📋 내 이슈 조회: viewer=%s, status=%s", viewer_id, status)

        return await self.search_use_case.execute(
            IssueSearchFilter(assignee_id=viewer_id, status=status)
        )

    async def execute_high_priority(self) -> list[dict]:
        """viewer에게 할당된 priority=1 이슈 뒤에 priority=2 이슈를 이어 붙여 반환합니다."""
        viewer_id = await self.linear_port.get_viewer_id()
        logger.info("🔥 내 높은 우선순위 이슈 조회: viewer=%s", viewer_id)

        issues: list[dict] = []
        for priority in _HIGH_PRIORITY_LEVELS:
            issues.extend(
                await self.search_use_case.execute(
                    IssueSearchFilter(assignee_id=viewer_id, priority=priority)
                )
            )
        return issues
