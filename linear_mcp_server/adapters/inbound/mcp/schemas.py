"""Tool 인자 검증 모델.

각 모델은 catalog.py의 inputSchema와 같은 필드 이름(camelCase alias)을 사용합니다.
검증 실패 시 pydantic.ValidationError가 발생하고 tools.py에서 필드별 위반 목록으로 변환됩니다.
"""
from pydantic import BaseModel, ConfigDict, Field


class _ToolArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class CreateIssueArgs(_ToolArgs):
    title: str
    team_id: str = Field(alias="teamId")
    description: str | None = None
    priority: int | None = Field(default=None, ge=0, le=4)
    status: str | None = None


class UpdateIssueArgs(_ToolArgs):
    id: str
    title: str | None = None
    description: str | None = None
    priority: int | None = Field(default=None, ge=0, le=4)
    status: str | None = None


class SearchIssuesArgs(_ToolArgs):
    query: str | None = None
    team_id: str | None = Field(default=None, alias="teamId")
    status: str | None = None
    assignee_id: str | None = Field(default=None, alias="assigneeId")
    labels: list[str] | None = None
    priority: int | None = Field(default=None, ge=0, le=4)
    estimate: float | None = None
    include_archived: bool | None = Field(default=None, alias="includeArchived")
    limit: int | None = Field(default=None, ge=1, le=250)


class GetUserIssuesArgs(_ToolArgs):
    user_id: str | None = Field(default=None, alias="userId")
    include_archived: bool | None = Field(default=None, alias="includeArchived")
    limit: int | None = Field(default=None, ge=1, le=250)


class AddCommentArgs(_ToolArgs):
    issue_id: str = Field(alias="issueId")
    body: str
    create_as_user: str | None = Field(default=None, alias="createAsUser")
    display_icon_url: str | None = Field(default=None, alias="displayIconUrl")
