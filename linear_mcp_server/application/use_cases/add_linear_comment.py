import logging

from linear_mcp_server.application.ports.linear_port import LinearPort
from linear_mcp_server.domain.linear import CommentDraft

logger = logging.getLogger(__name__)


class AddLinearCommentUseCase:
    """Linear 이슈에 코멘트를 추가하는 Use Case"""

    def __init__(self, linear_port: LinearPort):
        self.linear_port = linear_port

    async def execute(
        self,
        issue_id: str,
        body: str,
        create_as_user: str | None = None,
        display_icon_url: str | None = None,
    ) -> dict:
        """
        코멘트를 생성합니다.

        Args:
            issue_id: 코멘트를 달 이슈 ID
            body: 마크다운 본문
            create_as_user: 표시할 사용자 이름 (생략 가능)
            display_icon_url: 표시할 아바타 URL (생략 가능)

        Returns:
            {"comment": {...}, "issue": {...} | None}
        """
        logger.info("💬 AddLinearCommentUseCase 실행: issue=%s", issue_id)

        comment = await self.linear_port.add_comment(
            CommentDraft(
                issue_id=issue_id,
                body=body,
                create_as_user=create_as_user,
                display_icon_url=display_icon_url,
            )
        )

        issue = comment.issue
        return {
            "comment": {
                "id": comment.id,
                "body": comment.body,
                "url": comment.url,
            },
            "issue": {
                "id": issue.id,
                "identifier": issue.identifier,
                "title": issue.title,
                "url": issue.url,
            } if issue else None,
        }
