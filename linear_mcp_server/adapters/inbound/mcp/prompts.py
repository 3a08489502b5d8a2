import logging
from collections.abc import Callable

from mcp import types
from mcp.server import Server
from mcp.types import GetPromptResult, PromptMessage, TextContent

from linear_mcp_server.adapters.inbound.mcp.catalog import PROMPTS
from linear_mcp_server.domain.errors import UnsupportedRequestError

logger = logging.getLogger(__name__)


def _conversation(user_text: str, assistant_text: str) -> GetPromptResult:
    return GetPromptResult(
        messages=[
            PromptMessage(role="user", content=TextContent(type="text", text=user_text)),
            PromptMessage(role="assistant", content=TextContent(type="text", text=assistant_text)),
        ]
    )


def _create_issue(args: dict[str, str]) -> GetPromptResult:
    issue_type = args.get("issueType") or "task"
    component = args.get("component") or ""

    user_text = f"I need to create a new {issue_type} in Linear"
    user_text += f" for the {component} component." if component else "."

    assistant_text = (
        f"I'll help you create a new {issue_type}{f' for {component}' if component else ''}. "
        "Let's gather the necessary details:\n\n"
        f"1. What should be the title of this {issue_type}?\n"
        "2. Please provide a description with all relevant details"
        f"{', including reproduction steps' if issue_type == 'bug' else ''}.\n"
        "3. Which team should this be assigned to?\n"
        "4. What priority level would you assign (urgent, high, normal, low)?\n"
        "5. Any specific status you want to set initially?"
    )
    return _conversation(user_text, assistant_text)


def _bug_report(args: dict[str, str]) -> GetPromptResult:
    severity = args.get("severity") or "medium"
    browser = args.get("browser") or ""
    platform = args.get("platform") or ""

    user_text = (
        f"I need to file a {severity} severity bug report"
        f"{f' affecting {browser}' if browser else ''}"
        f"{f' on {platform}' if platform else ''}."
    )

    environment = ""
    if browser:
        environment += f"\n7. Browser: {browser}"
    if platform:
        environment += f"\n8. Platform: {platform}"

    assistant_text = (
        "I'll help you create a detailed bug report. Please provide the following information:\n\n"
        "1. Bug title: (Brief summary of the issue)\n"
        "2. Reproduction steps:\n"
        "   - Step 1:\n"
        "   - Step 2:\n"
        "   - ...\n"
        "3. Expected behavior:\n"
        "4. Actual behavior:\n"
        "5. Screenshots/videos: (if available)\n"
        f"6. Additional context:{environment}\n\n"
        "Once you provide this information, I'll help you create a well-structured bug report "
        f"in Linear with the appropriate priority level ({severity})."
    )
    return _conversation(user_text, assistant_text)


def _sprint_planning(args: dict[str, str]) -> GetPromptResult:
    team_id = args.get("teamId")
    if not team_id:
        raise ValueError("Missing required argument for prompt sprint-planning: teamId")
    sprint_duration = args.get("sprintDuration") or "2"
    sprint_goals = args.get("sprintGoals") or ""

    user_text = (
        f"I need help planning a {sprint_duration}-week sprint for team {team_id}"
        f"{f' with these goals: {sprint_goals}' if sprint_goals else ''}."
    )

    assistant_text = (
        f"I'll help you plan your {sprint_duration}-week sprint for team {team_id}. "
        "Let me gather some information about the current backlog and in-progress work.\n\n"
        "First, I'll need to:\n"
        f"1. Check existing issues for team {team_id}\n"
        "2. Analyze current workload distribution\n"
        "3. Review any carried-over work from previous sprints\n\n"
        f"{f'Based on your sprint goals ({sprint_goals}), ' if sprint_goals else ''}"
        "Would you like me to:\n"
        "- Suggest issues to include in this sprint?\n"
        "- Help prioritize existing backlog items?\n"
        "- Analyze team capacity?\n"
        "- Create sprint planning meeting notes?"
    )
    return _conversation(user_text, assistant_text)


def _work_status(args: dict[str, str]) -> GetPromptResult:
    timeframe = args.get("timeframe") or "week"
    user_id = args.get("userId") or "me"
    report_format = args.get("format") or "summary"

    whose_user = "my" if user_id == "me" else f"{user_id}'s"
    whose_assistant = "your" if user_id == "me" else f"{user_id}'s"

    user_text = f"Generate a {report_format} work status report for {whose_user} tasks over the past {timeframe}."

    assistant_text = (
        f"I'll generate a {report_format} work status report for {whose_assistant} tasks "
        f"over the past {timeframe}.\n\n"
        "I'll analyze:\n"
        "- Completed issues\n"
        "- In-progress work\n"
        "- Upcoming/planned tasks\n"
        "- Any blockers or dependencies\n\n"
        "Would you like me to include any specific information in this report, "
        "such as time estimates or specific projects?"
    )
    return _conversation(user_text, assistant_text)


def _search_helper(args: dict[str, str]) -> GetPromptResult:
    keywords = args.get("keywords") or ""
    status = args.get("status") or ""
    assignee = args.get("assignee") or ""
    priority = args.get("priority") or ""

    search_query = "I need to find issues"
    if keywords:
        search_query += f' containing "{keywords}"'
    if status:
        search_query += f' with status "{status}"'
    if assignee:
        search_query += f" assigned to {assignee}"
    if priority:
        search_query += f" with {priority} priority"

    criteria = ""
    if keywords:
        criteria += f'- Keywords: "{keywords}"\n'
    if status:
        criteria += f'- Status: "{status}"\n'
    if assignee:
        criteria += f"- Assignee: {'You' if assignee == 'me' else assignee}\n"
    if priority:
        criteria += f"- Priority: {priority}\n"

    assistant_text = (
        "I'll help you search for issues in Linear with these criteria:\n"
        f"{criteria}\n\n"
        "Would you like to:\n"
        "1. Add any other search filters?\n"
        "2. Sort results in a specific way?\n"
        "3. Limit the number of results?\n"
        "4. Include archived issues?"
    )
    return _conversation(search_query, assistant_text)


_PROMPT_RENDERERS: dict[str, Callable[[dict[str, str]], GetPromptResult]] = {
    "create-issue": _create_issue,
    "bug-report": _bug_report,
    "sprint-planning": _sprint_planning,
    "work-status": _work_status,
    "search-helper": _search_helper,
}


def get_prompt(name: str, arguments: dict[str, str] | None) -> GetPromptResult:
    """prompt 템플릿에 인자를 채워 사용자/어시스턴트 두 턴을 반환합니다. 원격 호출 없음."""
    renderer = _PROMPT_RENDERERS.get(name)
    if renderer is None:
        raise UnsupportedRequestError(f"Prompt not found: {name}")

    logger.info("💡 Prompt 요청: %s (인자: %s)", name, arguments or {})
    return renderer(arguments or {})


def register_prompts(app: Server) -> None:
    """MCP Prompt 핸들러를 서버에 등록합니다."""

    @app.list_prompts()
    async def list_prompts() -> list[types.Prompt]:
        return PROMPTS

    @app.get_prompt()
    async def handle_get_prompt(name: str, arguments: dict[str, str] | None) -> GetPromptResult:
        return get_prompt(name, arguments)
