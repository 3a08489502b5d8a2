import asyncio
import logging
from typing import Any

import httpx

from linear_mcp_server.domain.errors import LinearApiError, LinearNotFoundError
from linear_mcp_server.domain.issue_filter import build_issue_filter
from linear_mcp_server.domain.linear import (
    CommentDraft,
    IssueChanges,
    IssueDraft,
    IssueSearchFilter,
    LinearComment,
    LinearIssue,
    LinearIssueRef,
    LinearOrganization,
    LinearTeam,
    LinearUser,
    LinearViewer,
)

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.linear.app/graphql"

# 1차 조회에서 가져오는 이슈 필드. 연관 엔티티는 id만 받고 이후 별도 조회로 이름을 해석한다.
_ISSUE_FIELDS = """
    id
    identifier
    title
    description
    priority
    estimate
    url
    state { id }
    assignee { id }
    team { id }
"""

_GET_ISSUE = f"""
query GetIssue($id: String!) {{
  issue(id: $id) {{ {_ISSUE_FIELDS} }}
}}
"""

_CREATE_ISSUE = f"""
mutation CreateIssue($input: IssueCreateInput!) {{
  issueCreate(input: $input) {{
    success
    issue {{ {_ISSUE_FIELDS} }}
  }}
}}
"""

_UPDATE_ISSUE = f"""
mutation UpdateIssue($id: String!, $input: IssueUpdateInput!) {{
  issueUpdate(id: $id, input: $input) {{
    success
    issue {{ {_ISSUE_FIELDS} }}
  }}
}}
"""

_SEARCH_ISSUES = f"""
query SearchIssues($filter: IssueFilter, $first: Int, $includeArchived: Boolean) {{
  issues(filter: $filter, first: $first, includeArchived: $includeArchived) {{
    nodes {{ {_ISSUE_FIELDS} }}
  }}
}}
"""

_RECENT_ISSUES = f"""
query RecentIssues($first: Int) {{
  issues(first: $first, orderBy: updatedAt) {{
    nodes {{ {_ISSUE_FIELDS} }}
  }}
}}
"""

_USER_ASSIGNED_ISSUES = f"""
query UserAssignedIssues($id: String!, $first: Int, $includeArchived: Boolean) {{
  user(id: $id) {{
    id
    assignedIssues(first: $first, includeArchived: $includeArchived, orderBy: updatedAt) {{
      nodes {{ {_ISSUE_FIELDS} }}
    }}
  }}
}}
"""

_VIEWER_ASSIGNED_ISSUES = f"""
query ViewerAssignedIssues($first: Int, $includeArchived: Boolean) {{
  viewer {{
    id
    assignedIssues(first: $first, includeArchived: $includeArchived, orderBy: updatedAt) {{
      nodes {{ {_ISSUE_FIELDS} }}
    }}
  }}
}}
"""

_TEAM_ISSUES = f"""
query TeamIssues($id: String!, $first: Int) {{
  team(id: $id) {{
    id
    issues(first: $first) {{
      nodes {{ {_ISSUE_FIELDS} }}
    }}
  }}
}}
"""

_CREATE_COMMENT = f"""
mutation CreateComment($input: CommentCreateInput!) {{
  commentCreate(input: $input) {{
    success
    comment {{
      id
      body
      url
      issue {{ {_ISSUE_FIELDS} }}
    }}
  }}
}}
"""

_VIEWER = """
query Viewer {
  viewer { id name email admin }
}
"""

_VIEWER_ID = """
query ViewerId {
  viewer { id }
}
"""

_VIEWER_TEAMS = """
query ViewerTeams {
  viewer { teams { nodes { id name key } } }
}
"""

_ORGANIZATION = """
query Organization {
  organization { id name urlKey }
}
"""

_ORGANIZATION_TEAMS = """
query OrganizationTeams {
  organization { teams { nodes { id name key } } }
}
"""

_ORGANIZATION_USERS = """
query OrganizationUsers {
  organization { users { nodes { id name email admin active } } }
}
"""

_WORKFLOW_STATE_NAME = """
query WorkflowStateName($id: String!) {
  workflowState(id: $id) { id name }
}
"""

_USER_NAME = """
query UserName($id: String!) {
  user(id: $id) { id name }
}
"""

_TEAM_NAME = """
query TeamName($id: String!) {
  team(id: $id) { id name }
}
"""

_ISSUE_LABELS = """
query IssueLabels($id: String!) {
  issue(id: $id) { labels { nodes { name } } }
}
"""

# Linear가 team.issues()에 적용하는 기본 페이지 크기
_TEAM_ISSUES_PAGE_SIZE = 50


class LinearAdapter:
    """Linear GraphQL API와 통신하는 Outbound Adapter

    httpx.AsyncClient 하나를 시작 시 생성하여 모든 요청에서 공유합니다.
    연관 필드(state/assignee/team/labels) 조회는 semaphore로 동시 실행 수를 제한합니다.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        max_concurrency: int = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url
        self._http = httpx.AsyncClient(
            headers={"Authorization": api_key, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Public methods
    # ------------------------------------------------------------------

    async def get_issue(self, issue_id: str) -> LinearIssue:
        """이슈를 id(또는 identifier)로 조회하고 state/assignee/team 이름을 해석합니다."""
        logger.info("🔍 Linear 이슈 조회: %s", issue_id)

        data = await self._request_entity(
            "GetIssue",
            _GET_ISSUE,
            {"id": issue_id},
            not_found_msg=f"Issue {issue_id} not found",
        )
        node = data.get("issue")
        if not node:
            raise LinearNotFoundError(f"Issue {issue_id} not found")

        issue = await self._resolve(self._parse_issue_ref(node), state=True, assignee=True, team=True)
        logger.info("✅ 이슈 조회 성공: %s - %s", issue.identifier, issue.title)
        return issue

    async def create_issue(self, draft: IssueDraft) -> LinearIssue:
        """이슈를 생성합니다. 값이 없는 선택 필드는 input에서 제외합니다.

        status는 workflow state id로 그대로 전달합니다 (이름 → id 변환 없음).
        """
        payload: dict[str, Any] = {"title": draft.title, "teamId": draft.team_id}
        if draft.description is not None:
            payload["description"] = draft.description
        if draft.priority is not None:
            payload["priority"] = draft.priority
        if draft.status is not None:
            payload["stateId"] = draft.status

        logger.info("🌐 Linear 이슈 생성: team=%s, fields=%s", draft.team_id, sorted(payload))

        data = await self._request("CreateIssue", _CREATE_ISSUE, {"input": payload})
        node = (data.get("issueCreate") or {}).get("issue")
        if not node:
            raise LinearApiError("Failed to create issue", data=data)

        issue = self._issue_without_relations(self._parse_issue_ref(node))
        logger.info("✅ 이슈 생성 성공: %s", issue.identifier)
        return issue

    async def update_issue(self, changes: IssueChanges) -> LinearIssue:
        """이슈를 부분 수정합니다. 먼저 이슈 존재 여부를 확인합니다."""
        existing = await self._request_entity(
            "GetIssue",
            _GET_ISSUE,
            {"id": changes.id},
            not_found_msg=f"Issue {changes.id} not found",
        )
        if not existing.get("issue"):
            raise LinearNotFoundError(f"Issue {changes.id} not found")

        payload: dict[str, Any] = {}
        if changes.title is not None:
            payload["title"] = changes.title
        if changes.description is not None:
            payload["description"] = changes.description
        if changes.priority is not None:
            payload["priority"] = changes.priority
        if changes.status is not None:
            payload["stateId"] = changes.status

        logger.info("🌐 Linear 이슈 수정: id=%s, fields=%s", changes.id, sorted(payload))

        data = await self._request(
            "UpdateIssue",
            _UPDATE_ISSUE,
            {"id": existing["issue"]["id"], "input": payload},
        )
        node = (data.get("issueUpdate") or {}).get("issue")
        if not node:
            raise LinearApiError("Failed to update issue", data=data)

        issue = self._issue_without_relations(self._parse_issue_ref(node))
        logger.info("✅ 이슈 수정 성공: %s", issue.identifier)
        return issue

    async def search_issues(
        self,
        search: IssueSearchFilter,
        limit: int = 10,
        include_archived: bool | None = None,
    ) -> list[LinearIssue]:
        """조건에 맞는 이슈를 조회하고 state/assignee/labels를 해석합니다."""
        variables: dict[str, Any] = {"filter": build_issue_filter(search), "first": limit}
        if include_archived is not None:
            variables["includeArchived"] = include_archived

        logger.info("🌐 Linear 이슈 검색: filter=%s, first=%d", variables["filter"], limit)

        data = await self._request("SearchIssues", _SEARCH_ISSUES, variables)
        refs = [self._parse_issue_ref(n) for n in self._nodes(data.get("issues"))]

        issues = await asyncio.gather(
            *(self._resolve(ref, state=True, assignee=True, labels=True) for ref in refs)
        )
        logger.info("✅ 이슈 검색 성공: %d건", len(issues))
        return list(issues)

    async def get_user_issues(
        self,
        user_id: str | None = None,
        limit: int = 50,
        include_archived: bool | None = None,
    ) -> list[LinearIssue]:
        """사용자(user_id가 없으면 viewer)에게 할당된 이슈를 최근 수정 순으로 조회합니다."""
        variables: dict[str, Any] = {"first": limit}
        if include_archived is not None:
            variables["includeArchived"] = include_archived

        try:
            if user_id:
                variables["id"] = user_id
                data = await self._request("UserAssignedIssues", _USER_ASSIGNED_ISSUES, variables)
                user = data.get("user")
            else:
                data = await self._request("ViewerAssignedIssues", _VIEWER_ASSIGNED_ISSUES, variables)
                user = data.get("viewer")

            if not user:
                raise LinearApiError(
                    f"Could not resolve user: {user_id or 'viewer'}",
                    data=data,
                )

            refs = [self._parse_issue_ref(n) for n in self._nodes(user.get("assignedIssues"))]
            issues = await asyncio.gather(*(self._resolve(ref, state=True) for ref in refs))
        except Exception as e:
            logger.error("❌ 사용자 이슈 조회 실패 (user=%s): %s", user_id or "viewer", e)
            raise

        logger.info("✅ 사용자 이슈 조회 성공: %d건", len(issues))
        return list(issues)

    async def add_comment(self, draft: CommentDraft) -> LinearComment:
        """이슈에 코멘트를 추가합니다. createAsUser/displayIconUrl은 값이 있을 때만 전달합니다."""
        payload: dict[str, Any] = {"issueId": draft.issue_id, "body": draft.body}
        if draft.create_as_user is not None:
            payload["createAsUser"] = draft.create_as_user
        if draft.display_icon_url is not None:
            payload["displayIconUrl"] = draft.display_icon_url

        logger.info("🌐 Linear 코멘트 생성: issue=%s", draft.issue_id)

        data = await self._request("CreateComment", _CREATE_COMMENT, {"input": payload})
        node = (data.get("commentCreate") or {}).get("comment")
        if not node:
            raise LinearApiError("Failed to create comment", data=data)

        issue_node = node.get("issue")
        comment = LinearComment(
            id=node["id"],
            body=node.get("body", ""),
            url=node.get("url", ""),
            issue=self._issue_without_relations(self._parse_issue_ref(issue_node)) if issue_node else None,
        )
        logger.info("✅ 코멘트 생성 성공: %s", comment.id)
        return comment

    async def get_team_issues(self, team_id: str) -> list[LinearIssue]:
        """팀의 이슈 목록을 조회하고 state/assignee를 해석합니다."""
        data = await self._request_entity(
            "TeamIssues",
            _TEAM_ISSUES,
            {"id": team_id, "first": _TEAM_ISSUES_PAGE_SIZE},
            not_found_msg=f"Team {team_id} not found",
        )
        team = data.get("team")
        if not team:
            raise LinearNotFoundError(f"Team {team_id} not found")

        refs = [self._parse_issue_ref(n) for n in self._nodes(team.get("issues"))]
        issues = await asyncio.gather(*(self._resolve(ref, state=True, assignee=True) for ref in refs))
        logger.info("✅ 팀 이슈 조회 성공: team=%s, %d건", team_id, len(issues))
        return list(issues)

    async def get_viewer(self) -> LinearViewer:
        """viewer를 조회한 뒤 팀 목록과 조직 정보를 동시에 조회합니다."""
        data = await self._request("Viewer", _VIEWER)
        viewer = data.get("viewer")
        if not viewer:
            raise LinearApiError("Could not resolve viewer", data=data)

        teams_data, org_data = await asyncio.gather(
            self._request("ViewerTeams", _VIEWER_TEAMS),
            self._request("Organization", _ORGANIZATION),
        )
        organization = org_data.get("organization") or {}

        return LinearViewer(
            id=viewer["id"],
            name=viewer.get("name", ""),
            email=viewer.get("email"),
            admin=bool(viewer.get("admin")),
            teams=tuple(
                self._parse_team(t) for t in self._nodes((teams_data.get("viewer") or {}).get("teams"))
            ),
            organization=LinearOrganization(
                id=organization.get("id", ""),
                name=organization.get("name", ""),
                url_key=organization.get("urlKey", ""),
            ),
        )

    async def get_viewer_id(self) -> str:
        data = await self._request("ViewerId", _VIEWER_ID)
        viewer = data.get("viewer")
        if not viewer or not viewer.get("id"):
            raise LinearApiError("Could not resolve viewer", data=data)
        return viewer["id"]

    async def get_organization(self) -> LinearOrganization:
        """조직을 조회한 뒤 팀 목록과 사용자 목록을 동시에 조회합니다."""
        data = await self._request("Organization", _ORGANIZATION)
        organization = data.get("organization")
        if not organization:
            raise LinearApiError("Could not resolve organization", data=data)

        teams_data, users_data = await asyncio.gather(
            self._request("OrganizationTeams", _ORGANIZATION_TEAMS),
            self._request("OrganizationUsers", _ORGANIZATION_USERS),
        )

        return LinearOrganization(
            id=organization["id"],
            name=organization.get("name", ""),
            url_key=organization.get("urlKey", ""),
            teams=tuple(
                self._parse_team(t)
                for t in self._nodes((teams_data.get("organization") or {}).get("teams"))
            ),
            users=tuple(
                LinearUser(
                    id=u["id"],
                    name=u.get("name", ""),
                    email=u.get("email"),
                    admin=bool(u.get("admin")),
                    active=bool(u.get("active")),
                )
                for u in self._nodes((users_data.get("organization") or {}).get("users"))
            ),
        )

    async def list_recent_issues(self, limit: int = 50) -> list[LinearIssue]:
        """최근 수정된 이슈를 조회하고 state/assignee/team을 해석합니다."""
        data = await self._request("RecentIssues", _RECENT_ISSUES, {"first": limit})
        refs = [self._parse_issue_ref(n) for n in self._nodes(data.get("issues"))]
        issues = await asyncio.gather(
            *(self._resolve(ref, state=True, assignee=True, team=True) for ref in refs)
        )
        return list(issues)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        operation_name: str,
        query: str,
        variables: dict[str, Any] | None = None,
    ) -> dict:
        """공통 GraphQL 요청. 응답의 `data` dict 반환."""
        body = {"query": query, "variables": variables or {}, "operationName": operation_name}
        try:
            response = await self._http.post(self.api_url, json=body)
            logger.debug("%s: HTTP %d", operation_name, response.status_code)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("❌ HTTP 오류 발생 (%s): %d", operation_name, e.response.status_code)
            logger.error("응답 본문: %s", e.response.text[:500])
            self._raise_linear_error(e)
        except httpx.TransportError as e:
            logger.error("❌ 네트워크 오류 (%s): %s", operation_name, e)
            raise LinearApiError(f"Failed to connect to Linear API: {self.api_url}") from e
        except ValueError as e:
            logger.error("❌ 응답 파싱 실패 (%s): %s", operation_name, e)
            raise LinearApiError(f"Invalid response from Linear API ({operation_name})") from e

        errors = payload.get("errors")
        if errors:
            message = errors[0].get("message", "Unknown GraphQL error")
            logger.error("❌ GraphQL 오류 (%s): %s", operation_name, message)
            raise LinearApiError(message, status=response.status_code, data=errors)

        return payload.get("data") or {}

    async def _request_entity(
        self,
        operation_name: str,
        query: str,
        variables: dict[str, Any],
        *,
        not_found_msg: str,
    ) -> dict:
        """단일 엔티티 조회. Linear의 'Entity not found' 오류를 LinearNotFoundError로 변환합니다."""
        try:
            return await self._request(operation_name, query, variables)
        except LinearApiError as e:
            if _is_entity_not_found(e.data):
                raise LinearNotFoundError(not_found_msg) from e
            raise

    def _raise_linear_error(self, e: httpx.HTTPStatusError) -> None:
        """HTTP 상태 코드별 LinearApiError를 발생시킵니다."""
        status = e.response.status_code
        try:
            body = e.response.json()
        except ValueError:
            body = e.response.text[:500]
        data = body.get("errors", body) if isinstance(body, dict) else body

        if _is_entity_not_found(data):
            raise LinearApiError("Entity not found", status=status, data=data) from e
        if status == 401:
            raise LinearApiError(
                "Linear authentication failed: check LINEAR_API_KEY", status=status, data=data
            ) from e
        if status == 403:
            raise LinearApiError("Linear access denied", status=status, data=data) from e
        if status == 429:
            raise LinearApiError("Linear API rate limit exceeded", status=status, data=data) from e
        if isinstance(data, list) and data and isinstance(data[0], dict) and data[0].get("message"):
            raise LinearApiError(data[0]["message"], status=status, data=data) from e
        raise LinearApiError(f"Linear API error: {status}", status=status, data=data) from e

    async def _resolve(
        self,
        ref: LinearIssueRef,
        *,
        state: bool = False,
        assignee: bool = False,
        team: bool = False,
        labels: bool = False,
    ) -> LinearIssue:
        """이슈의 연관 필드를 동시에 조회하여 이름으로 해석합니다."""
        state_name, assignee_name, team_name, label_names = await asyncio.gather(
            self._lookup_name("WorkflowStateName", _WORKFLOW_STATE_NAME, "workflowState", ref.state_id)
            if state else _none(),
            self._lookup_name("UserName", _USER_NAME, "user", ref.assignee_id)
            if assignee else _none(),
            self._lookup_name("TeamName", _TEAM_NAME, "team", ref.team_id)
            if team else _none(),
            self._lookup_labels(ref.id) if labels else _none(),
        )
        return LinearIssue(
            id=ref.id,
            identifier=ref.identifier,
            title=ref.title,
            url=ref.url,
            description=ref.description,
            priority=ref.priority,
            estimate=ref.estimate,
            status=state_name,
            assignee=assignee_name,
            team=team_name,
            labels=tuple(label_names or ()),
        )

    async def _lookup_name(
        self,
        operation_name: str,
        query: str,
        field: str,
        entity_id: str | None,
    ) -> str | None:
        if not entity_id:
            return None
        async with self._semaphore:
            data = await self._request(operation_name, query, {"id": entity_id})
        return (data.get(field) or {}).get("name")

    async def _lookup_labels(self, issue_id: str) -> list[str]:
        async with self._semaphore:
            data = await self._request("IssueLabels", _ISSUE_LABELS, {"id": issue_id})
        return [label.get("name", "") for label in self._nodes((data.get("issue") or {}).get("labels"))]

    @staticmethod
    def _nodes(connection: dict | None) -> list[dict]:
        return (connection or {}).get("nodes") or []

    @staticmethod
    def _parse_team(node: dict) -> LinearTeam:
        return LinearTeam(id=node["id"], name=node.get("name", ""), key=node.get("key", ""))

    @staticmethod
    def _parse_issue_ref(node: dict[str, Any]) -> LinearIssueRef:
        """API 응답 노드를 LinearIssueRef로 파싱합니다."""
        priority = node.get("priority")
        return LinearIssueRef(
            id=node["id"],
            identifier=node.get("identifier", ""),
            title=node.get("title", ""),
            url=node.get("url", ""),
            description=node.get("description"),
            priority=int(priority) if priority is not None else None,
            estimate=node.get("estimate"),
            state_id=(node.get("state") or {}).get("id"),
            assignee_id=(node.get("assignee") or {}).get("id"),
            team_id=(node.get("team") or {}).get("id"),
        )

    @staticmethod
    def _issue_without_relations(ref: LinearIssueRef) -> LinearIssue:
        return LinearIssue(
            id=ref.id,
            identifier=ref.identifier,
            title=ref.title,
            url=ref.url,
            description=ref.description,
            priority=ref.priority,
            estimate=ref.estimate,
        )


async def _none() -> None:
    return None


def _is_entity_not_found(errors: Any) -> bool:
    """Linear GraphQL 오류 목록이 '엔티티 없음'을 의미하는지 확인합니다."""
    if not isinstance(errors, list):
        return False
    for error in errors:
        if not isinstance(error, dict):
            continue
        message = str(error.get("message", "")).lower()
        extensions = error.get("extensions") or {}
        if "entity not found" in message or extensions.get("code") == "NOT_FOUND":
            return True
    return False
