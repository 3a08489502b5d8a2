from mcp.types import Prompt, PromptArgument, Resource, ResourceTemplate, Tool

# ── Tools ──

CREATE_ISSUE_TOOL = Tool(
    name="linear_create_issue",
    description=(
        "Creates a new Linear issue with specified details. Use this to create tickets for tasks, "
        "bugs, or feature requests. Returns the created issue's identifier and URL. Required fields "
        "are title and teamId, with optional description, priority (0-4, where 0 is no priority and "
        "1 is urgent), and status."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "title": {"type": "string", "description": "Issue title"},
            "teamId": {"type": "string", "description": "Team ID"},
            "description": {"type": "string", "description": "Issue description"},
            "priority": {"type": "number", "description": "Priority (0-4)"},
            "status": {"type": "string", "description": "Issue status"},
        },
        "required": ["title", "teamId"],
    },
)

UPDATE_ISSUE_TOOL = Tool(
    name="linear_update_issue",
    description=(
        "Updates an existing Linear issue's properties. Use this to modify issue details like title, "
        "description, priority, or status. Requires the issue ID and accepts any combination of "
        "updatable fields. Returns the updated issue's identifier and URL."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "id": {"type": "string", "description": "Issue ID"},
            "title": {"type": "string", "description": "New title"},
            "description": {"type": "string", "description": "New description"},
            "priority": {"type": "number", "description": "New priority (0-4)"},
            "status": {"type": "string", "description": "New status"},
        },
        "required": ["id"],
    },
)

SEARCH_ISSUES_TOOL = Tool(
    name="linear_search_issues",
    description=(
        "Searches Linear issues using flexible criteria. Supports filtering by any combination of: "
        "title/description text, team, status, assignee, labels, priority (1=urgent, 2=high, "
        "3=normal, 4=low), and estimate. Returns up to 10 issues by default (configurable via limit)."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "Optional text to search in title and description"},
            "teamId": {"type": "string", "description": "Filter by team ID"},
            "status": {"type": "string", "description": "Filter by status name (e.g., 'In Progress', 'Done')"},
            "assigneeId": {"type": "string", "description": "Filter by assignee's user ID"},
            "labels": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Filter by label names",
            },
            "priority": {
                "type": "number",
                "description": "Filter by priority (1=urgent, 2=high, 3=normal, 4=low)",
            },
            "estimate": {
                "type": "number",
                "description": "Filter by estimate points",
            },
            "includeArchived": {
                "type": "boolean",
                "description": "Include archived issues in results (default: false)",
            },
            "limit": {
                "type": "number",
                "description": "Max results to return (default: 10)",
            },
        },
    },
)

GET_USER_ISSUES_TOOL = Tool(
    name="linear_get_user_issues",
    description=(
        "Retrieves issues assigned to a specific user or the authenticated user if no userId is "
        "provided. Returns issues sorted by last updated, including priority, status, and other "
        "metadata. Useful for finding a user's workload or tracking assigned tasks."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "userId": {
                "type": "string",
                "description": "Optional user ID. If not provided, returns authenticated user's issues",
            },
            "includeArchived": {"type": "boolean", "description": "Include archived issues in results"},
            "limit": {"type": "number", "description": "Maximum number of issues to return (default: 50)"},
        },
    },
)

ADD_COMMENT_TOOL = Tool(
    name="linear_add_comment",
    description=(
        "Adds a comment to an existing Linear issue. Supports markdown formatting in the comment body. "
        "Can optionally specify a custom user name and avatar for the comment. Returns the created "
        "comment's details including its URL."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "issueId": {"type": "string", "description": "ID of the issue to comment on"},
            "body": {"type": "string", "description": "Comment text in markdown format"},
            "createAsUser": {"type": "string", "description": "Optional custom username to show for the comment"},
            "displayIconUrl": {"type": "string", "description": "Optional avatar URL for the comment"},
        },
        "required": ["issueId", "body"],
    },
)

TOOLS: list[Tool] = [
    CREATE_ISSUE_TOOL,
    UPDATE_ISSUE_TOOL,
    SEARCH_ISSUES_TOOL,
    GET_USER_ISSUES_TOOL,
    ADD_COMMENT_TOOL,
]

# ── Resources (파라미터 없는 고정 resource) ──

RESOURCES: list[Resource] = [
    Resource(
        uri="linear-viewer://",
        name="Linear User Profile",
        description="Your Linear user profile information, including teams and permissions",
        mimeType="application/json",
    ),
    Resource(
        uri="linear-organization://",
        name="Linear Organization",
        description="Details about your Linear organization, including teams and settings",
        mimeType="application/json",
    ),
    Resource(
        uri="linear-my-issues://",
        name="My Linear Issues",
        description="All issues currently assigned to you",
        mimeType="application/json",
    ),
    Resource(
        uri="linear-my-backlog://",
        name="My Backlog Issues",
        description="Issues assigned to you in the Backlog",
        mimeType="application/json",
    ),
    Resource(
        uri="linear-my-planned://",
        name="My Planned Issues",
        description="Issues assigned to you that are Planned this Cycle",
        mimeType="application/json",
    ),
    Resource(
        uri="linear-my-in-progress://",
        name="My In-Progress Issues",
        description="Issues assigned to you that are currently in progress",
        mimeType="application/json",
    ),
    Resource(
        uri="linear-my-under-review://",
        name="My Under Review Issues",
        description="Issues assigned to you that are under review",
        mimeType="application/json",
    ),
    Resource(
        uri="linear-my-high-priority://",
        name="My High Priority Issues",
        description="High priority issues assigned to you",
        mimeType="application/json",
    ),
]

# ── Resource templates ──

RESOURCE_TEMPLATES: list[ResourceTemplate] = [
    ResourceTemplate(
        uriTemplate="linear-issue://{issueId}",
        name="Linear Issue",
        description=(
            "A Linear issue with its details, comments, and metadata. "
            "Use this to fetch detailed information about a specific issue."
        ),
        parameters={
            "issueId": {
                "type": "string",
                "description": "The unique identifier of the Linear issue (e.g., the internal ID)",
            },
        },
        examples=["linear-issue://c2b318fb-95d2-4a81-9539-f3268f34af87"],
    ),
    ResourceTemplate(
        uriTemplate="linear-team://{teamId}",
        name="Team Issues",
        description=(
            "All active issues belonging to a specific Linear team, "
            "including their status, priority, and assignees."
        ),
        parameters={
            "teamId": {
                "type": "string",
                "description": "The unique identifier of the Linear team (found in team settings)",
            },
        },
        examples=["linear-team://TEAM-123"],
    ),
    ResourceTemplate(
        uriTemplate="linear-user://{userId}",
        name="User Assigned Issues",
        description="Active issues assigned to a specific Linear user. Returns issues sorted by update date.",
        parameters={
            "userId": {
                "type": "string",
                "description": "The unique identifier of the Linear user. Use 'me' for the authenticated user",
            },
        },
        examples=["linear-user://USER-123", "linear-user://me"],
    ),
    ResourceTemplate(
        uriTemplate="linear-search://{query}",
        name="Search Linear Issues",
        description="Search for Linear issues with a query string",
        parameters={
            "query": {
                "type": "string",
                "description": "Search query for finding issues",
            },
        },
        examples=["linear-search://bug", "linear-search://priority:high"],
    ),
    ResourceTemplate(
        uriTemplate="linear-priority://{level}",
        name="Issues by Priority",
        description="Find Linear issues matching a specific priority level",
        parameters={
            "level": {
                "type": "string",
                "description": "Priority level (urgent, high, medium, low, or none)",
            },
        },
        examples=["linear-priority://urgent", "linear-priority://high"],
    ),
]

# ── Prompts ──

CREATE_ISSUE_PROMPT = Prompt(
    name="create-issue",
    description="Create a well-structured Linear issue with all necessary details",
    arguments=[
        PromptArgument(name="issueType", description="Type of issue (bug, feature, task, etc.)", required=False),
        PromptArgument(name="component", description="Component or area affected (UI, API, backend, etc.)", required=False),
    ],
)

BUG_REPORT_PROMPT = Prompt(
    name="bug-report",
    description="File a detailed bug report with reproduction steps",
    arguments=[
        PromptArgument(name="severity", description="How severe is this bug (critical, high, medium, low)", required=False),
        PromptArgument(name="browser", description="Browser info if relevant", required=False),
        PromptArgument(name="platform", description="Platform info if relevant (OS, device, etc.)", required=False),
    ],
)

SPRINT_PLANNING_PROMPT = Prompt(
    name="sprint-planning",
    description="Analyze and organize issues for sprint planning",
    arguments=[
        PromptArgument(name="teamId", description="ID of the team planning the sprint", required=True),
        PromptArgument(name="sprintDuration", description="Duration of the sprint in weeks", required=False),
        PromptArgument(name="sprintGoals", description="Primary goals for this sprint", required=False),
    ],
)

WORK_STATUS_PROMPT = Prompt(
    name="work-status",
    description="Generate a status report of work items and progress",
    arguments=[
        PromptArgument(name="timeframe", description="Timeframe to report on (today, week, sprint)", required=False),
        PromptArgument(name="userId", description="User ID to report on (defaults to current user)", required=False),
        PromptArgument(name="format", description="Report format (summary, detailed)", required=False),
    ],
)

SEARCH_HELPER_PROMPT = Prompt(
    name="search-helper",
    description="Find issues with guided search parameters",
    arguments=[
        PromptArgument(name="keywords", description="Keywords to search for", required=False),
        PromptArgument(name="status", description="Issue status to filter by", required=False),
        PromptArgument(name="assignee", description="Filter by assignee (username or 'me')", required=False),
        PromptArgument(name="priority", description="Priority level (urgent, high, normal, low)", required=False),
    ],
)

PROMPTS: list[Prompt] = [
    CREATE_ISSUE_PROMPT,
    BUG_REPORT_PROMPT,
    SPRINT_PLANNING_PROMPT,
    WORK_STATUS_PROMPT,
    SEARCH_HELPER_PROMPT,
]
