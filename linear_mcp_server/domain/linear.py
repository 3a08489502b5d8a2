from dataclasses import dataclass, field


@dataclass(frozen=True)
class LinearIssue:
    """Linear 이슈 엔티티 (연관 필드는 이름으로 해석된 상태)"""
    id: str
    identifier: str
    title: str
    url: str
    description: str | None = None
    priority: int | None = None
    estimate: float | None = None
    status: str | None = None       # workflow state 이름
    assignee: str | None = None     # 담당자 이름
    team: str | None = None         # 팀 이름
    labels: tuple[str, ...] = ()


@dataclass(frozen=True)
class LinearIssueRef:
    """1차 조회 결과. 연관 엔티티는 id만 가지고 있고 이후 별도 조회로 해석한다."""
    id: str
    identifier: str
    title: str
    url: str
    description: str | None = None
    priority: int | None = None
    estimate: float | None = None
    state_id: str | None = None
    assignee_id: str | None = None
    team_id: str | None = None


@dataclass(frozen=True)
class LinearComment:
    """Linear 코멘트 엔티티"""
    id: str
    body: str
    url: str
    issue: LinearIssue | None = None


@dataclass(frozen=True)
class LinearTeam:
    id: str
    name: str
    key: str


@dataclass(frozen=True)
class LinearUser:
    id: str
    name: str
    email: str | None = None
    admin: bool = False
    active: bool = True


@dataclass(frozen=True)
class LinearOrganization:
    """Linear 조직 엔티티 (API 키당 하나)"""
    id: str
    name: str
    url_key: str
    teams: tuple[LinearTeam, ...] = ()
    users: tuple[LinearUser, ...] = ()


@dataclass(frozen=True)
class LinearViewer:
    """현재 API 키로 인증된 사용자"""
    id: str
    name: str
    email: str | None
    admin: bool
    teams: tuple[LinearTeam, ...] = ()
    organization: LinearOrganization | None = None


@dataclass(frozen=True)
class IssueDraft:
    """이슈 생성 입력. None인 선택 필드는 원격 호출에서 아예 제외된다."""
    title: str
    team_id: str
    description: str | None = None
    priority: int | None = None
    status: str | None = None


@dataclass(frozen=True)
class IssueChanges:
    """이슈 부분 수정 입력"""
    id: str
    title: str | None = None
    description: str | None = None
    priority: int | None = None
    status: str | None = None


@dataclass(frozen=True)
class CommentDraft:
    issue_id: str
    body: str
    create_as_user: str | None = None
    display_icon_url: str | None = None


@dataclass(frozen=True)
class IssueSearchFilter:
    """이슈 검색 조건. 값이 있는 필드만 AND 조건으로 묶인다."""
    query: str | None = None
    team_id: str | None = None
    status: str | None = None
    assignee_id: str | None = None
    labels: tuple[str, ...] = field(default_factory=tuple)
    priority: int | None = None
    estimate: float | None = None
