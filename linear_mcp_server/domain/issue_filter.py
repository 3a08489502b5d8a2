from typing import Any

from linear_mcp_server.domain.linear import IssueSearchFilter


def build_issue_filter(search: IssueSearchFilter) -> dict[str, Any]:
    """IssueSearchFilter를 Linear GraphQL `IssueFilter` 형태로 변환합니다.

    - query: 제목 OR 설명에 포함 (contains)
    - labels: 라벨 이름이 목록 중 하나라도 일치 (some.name.in)
    - 나머지: 동등 비교 (eq)

    값이 없는 필드(None, 빈 문자열, 빈 목록)는 필터에서 완전히 제외합니다.
    priority 0 ("우선순위 없음")과 estimate 0은 유효한 값으로 취급합니다.
    """
    issue_filter: dict[str, Any] = {}

    if search.query:
        issue_filter["or"] = [
            {"title": {"contains": search.query}},
            {"description": {"contains": search.query}},
        ]

    if search.team_id:
        issue_filter["team"] = {"id": {"eq": search.team_id}}

    if search.status:
        issue_filter["state"] = {"name": {"eq": search.status}}

    if search.assignee_id:
        issue_filter["assignee"] = {"id": {"eq": search.assignee_id}}

    if search.labels:
        issue_filter["labels"] = {"some": {"name": {"in": list(search.labels)}}}

    if search.priority is not None:
        issue_filter["priority"] = {"eq": search.priority}

    if search.estimate is not None:
        issue_filter["estimate"] = {"eq": search.estimate}

    return issue_filter
