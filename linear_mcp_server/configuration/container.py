from dataclasses import dataclass
from functools import lru_cache

from linear_mcp_server.adapters.outbound.linear_adapter import LinearAdapter
from linear_mcp_server.application.ports.linear_port import LinearPort
from linear_mcp_server.application.use_cases.add_linear_comment import AddLinearCommentUseCase
from linear_mcp_server.application.use_cases.create_linear_issue import CreateLinearIssueUseCase
from linear_mcp_server.application.use_cases.get_linear_issue import GetLinearIssueUseCase
from linear_mcp_server.application.use_cases.get_my_issues import GetMyIssuesUseCase
from linear_mcp_server.application.use_cases.get_team_issues import GetTeamIssuesUseCase
from linear_mcp_server.application.use_cases.get_user_issues import GetUserIssuesUseCase
from linear_mcp_server.application.use_cases.get_workspace_meta import GetOrganizationUseCase, GetViewerUseCase
from linear_mcp_server.application.use_cases.list_recent_issues import ListRecentIssuesUseCase
from linear_mcp_server.application.use_cases.search_linear_issues import SearchLinearIssuesUseCase
from linear_mcp_server.application.use_cases.update_linear_issue import UpdateLinearIssueUseCase
from linear_mcp_server.configuration.settings import Settings, build_settings


@dataclass(frozen=True)
class Container:
    settings: Settings
    linear_port: LinearPort
    get_issue_use_case: GetLinearIssueUseCase
    create_issue_use_case: CreateLinearIssueUseCase
    update_issue_use_case: UpdateLinearIssueUseCase
    search_issues_use_case: SearchLinearIssuesUseCase
    get_user_issues_use_case: GetUserIssuesUseCase
    add_comment_use_case: AddLinearCommentUseCase
    get_team_issues_use_case: GetTeamIssuesUseCase
    get_viewer_use_case: GetViewerUseCase
    get_organization_use_case: GetOrganizationUseCase
    get_my_issues_use_case: GetMyIssuesUseCase
    list_recent_issues_use_case: ListRecentIssuesUseCase


def create_container(settings: Settings, linear_port: LinearPort) -> Container:
    """주어진 Port로 Use Case를 조립합니다."""
    search_issues_use_case = SearchLinearIssuesUseCase(linear_port=linear_port)

    return Container(
        settings=settings,
        linear_port=linear_port,
        get_issue_use_case=GetLinearIssueUseCase(linear_port=linear_port),
        create_issue_use_case=CreateLinearIssueUseCase(linear_port=linear_port),
        update_issue_use_case=UpdateLinearIssueUseCase(linear_port=linear_port),
        search_issues_use_case=search_issues_use_case,
        get_user_issues_use_case=GetUserIssuesUseCase(linear_port=linear_port),
        add_comment_use_case=AddLinearCommentUseCase(linear_port=linear_port),
        get_team_issues_use_case=GetTeamIssuesUseCase(linear_port=linear_port),
        get_viewer_use_case=GetViewerUseCase(linear_port=linear_port),
        get_organization_use_case=GetOrganizationUseCase(linear_port=linear_port),
        get_my_issues_use_case=GetMyIssuesUseCase(
            linear_port=linear_port,
            search_use_case=search_issues_use_case,
        ),
        list_recent_issues_use_case=ListRecentIssuesUseCase(linear_port=linear_port),
    )


@lru_cache(maxsize=1)
def build_container() -> Container:
    settings = build_settings()

    # 프로세스 전체에서 공유하는 단일 Linear 클라이언트
    linear_adapter = LinearAdapter(
        api_key=settings.linear_api_key,
        api_url=settings.linear_api_url,
        timeout=settings.linear_timeout,
        max_concurrency=settings.max_concurrency,
    )

    return create_container(settings, linear_adapter)


def clear_container() -> None:
    build_container.cache_clear()
