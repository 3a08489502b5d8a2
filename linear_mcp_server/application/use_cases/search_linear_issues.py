import logging

from linear_mcp_server.application.ports.linear_port import LinearPort
from linear_mcp_server.domain.linear import IssueSearchFilter

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 10


class SearchLinearIssuesUseCase:
    """조건 조합으로 Linear 이슈를 검색하는 Use Case"""

    def __init__(self, linear_port: LinearPort):
        self.linear_port = linear_port

    async def execute(
        self,
        search: IssueSearchFilter,
        limit: int | None = None,
        include_archived: bool | None = None,
    ) -> list[dict]:
        """
        Linear 이슈를 검색합니다.

        Args:
            search: 검색 조건. 값이 없는 필드는 필터에서 제외됨
            limit: 최대 결과 수. None이면 10건
            include_archived: 보관된 이슈 포함 여부

        Returns:
            이슈 목록 (dict 형식, 라벨 이름 포함)
        """
        logger.info("🔍 SearchLinearIssuesUseCase 실행: %s", search)

        issues = await self.linear_port.search_issues(
            search,
            limit=limit or DEFAULT_SEARCH_LIMIT,
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
                "estimate": issue.estimate,
                "status": issue.status,
                "assignee": issue.assignee,
                "labels": list(issue.labels),
                "url": issue.url,
            }
            for issue in issues
        ]
