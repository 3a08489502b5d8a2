from typing import Protocol

from linear_mcp_server.domain.linear import (
    CommentDraft,
    IssueChanges,
    IssueDraft,
    IssueSearchFilter,
    LinearComment,
    LinearIssue,
    LinearOrganization,
    LinearViewer,
)


class LinearPort(Protocol):
    """Linear 서비스와의 계약을 정의하는 Port"""

    async def get_issue(self, issue_id: str) -> LinearIssue:
        """이슈를 id(또는 identifier)로 조회합니다. 없으면 LinearNotFoundError."""
        ...

    async def create_issue(self, draft: IssueDraft) -> LinearIssue:
        """이슈를 생성합니다."""
        ...

    async def update_issue(self, changes: IssueChanges) -> LinearIssue:
        """이슈의 지정된 필드만 수정합니다."""
        ...

    async def search_issues(
        self,
        search: IssueSearchFilter,
        limit: int = 10,
        include_archived: bool | None = None,
    ) -> list[LinearIssue]:
        """조건에 맞는 이슈를 조회합니다."""
        ...

    async def get_user_issues(
        self,
        user_id: str | None = None,
        limit: int = 50,
        include_archived: bool | None = None,
    ) -> list[LinearIssue]:
        """사용자(없으면 viewer)에게 할당된 이슈를 조회합니다."""
        ...

    async def add_comment(self, draft: CommentDraft) -> LinearComment:
        """이슈에 코멘트를 추가합니다."""
        ...

    async def get_team_issues(self, team_id: str) -> list[LinearIssue]:
        """팀의 이슈 목록을 조회합니다."""
        ...

    async def get_viewer(self) -> LinearViewer:
        """인증된 사용자 정보(팀, 조직 포함)를 조회합니다."""
        ...

    async def get_viewer_id(self) -> str:
        """인증된 사용자의 id만 조회합니다."""
        ...

    async def get_organization(self) -> LinearOrganization:
        """조직 정보(팀, 사용자 포함)를 조회합니다."""
        ...

    async def list_recent_issues(self, limit: int = 50) -> list[LinearIssue]:
        """최근 수정된 이슈를 조회합니다."""
        ...

    async def aclose(self) -> None:
        """공유 HTTP 연결을 정리합니다."""
        ...
