from dataclasses import dataclass
from enum import Enum
from urllib.parse import unquote

from linear_mcp_server.domain.errors import InvalidResourceError, UnsupportedRequestError

# 우선순위 이름 → Linear 숫자 우선순위 (0: 없음, 1: 가장 긴급)
PRIORITY_LEVELS: dict[str, int] = {
    "urgent": 1,
    "high": 2,
    "medium": 3,
    "low": 4,
    "none": 0,
}


class ResourceKind(Enum):
    VIEWER = "linear-viewer"
    ORGANIZATION = "linear-organization"
    MY_ISSUES = "linear-my-issues"
    MY_BACKLOG = "linear-my-backlog"
    MY_PLANNED = "linear-my-planned"
    MY_IN_PROGRESS = "linear-my-in-progress"
    MY_UNDER_REVIEW = "linear-my-under-review"
    MY_HIGH_PRIORITY = "linear-my-high-priority"
    RECENT_ISSUES = "linear-recent-issues"
    ISSUE = "linear-issue"
    TEAM = "linear-team"
    USER = "linear-user"
    SEARCH = "linear-search"
    PRIORITY = "linear-priority"

    @property
    def scheme(self) -> str:
        return self.value


# "내 이슈" 상태 버킷 → Linear workflow state 이름 (정확히 이 문자열로 필터링)
MY_STATUS_BUCKETS: dict[ResourceKind, str] = {
    ResourceKind.MY_BACKLOG: "Backlog",
    ResourceKind.MY_PLANNED: "Planned this Cycle",
    ResourceKind.MY_IN_PROGRESS: "In Progress",
    ResourceKind.MY_UNDER_REVIEW: "Under Review",
}

# 경로 파라미터가 필수인 템플릿 resource와 누락 시 에러 메시지
_REQUIRED_PARAMS: dict[ResourceKind, str] = {
    ResourceKind.ISSUE: "Issue ID is required for linear-issue resource",
    ResourceKind.TEAM: "Team ID is required for linear-team resource",
    ResourceKind.USER: "User ID is required for linear-user resource",
    ResourceKind.SEARCH: "Search query is required for linear-search resource",
    ResourceKind.PRIORITY: "Priority level is required for linear-priority resource",
}

_KINDS_BY_SCHEME = {kind.scheme: kind for kind in ResourceKind}


@dataclass(frozen=True)
class ResourceRequest:
    """파싱된 resource URI (종류 + 경로 파라미터)"""
    kind: ResourceKind
    param: str = ""

    @property
    def uri(self) -> str:
        return f"{self.kind.scheme}://{self.param}"


def parse_resource_uri(uri: str) -> ResourceRequest:
    """resource URI를 첫 번째 `://` 기준으로 scheme과 경로로 분리합니다.

    원격 호출 전에 모든 형식 검증을 끝냅니다.
    경로는 percent-decoding 후 사용합니다 (예: linear-search://login%20bug).
    """
    scheme, sep, path = uri.partition("://")
    if not sep or not scheme:
        raise InvalidResourceError(f"Invalid URI format: {uri}")

    kind = _KINDS_BY_SCHEME.get(scheme)
    if kind is None:
        raise UnsupportedRequestError(f"Unsupported resource URI: {uri}")

    param = unquote(path)
    if kind in _REQUIRED_PARAMS and not param:
        raise InvalidResourceError(_REQUIRED_PARAMS[kind])

    return ResourceRequest(kind=kind, param=param)


def resolve_priority_level(level: str) -> int:
    """우선순위 이름(대소문자 무시)을 Linear 숫자 우선순위로 변환합니다."""
    priority = PRIORITY_LEVELS.get(level.lower())
    if priority is None:
        raise InvalidResourceError(
            f"Invalid priority level: {level}. Valid values are: urgent, high, medium, low, none"
        )
    return priority
