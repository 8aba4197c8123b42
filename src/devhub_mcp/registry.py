"""Tool registry: the public contract surface.

Every tool is declared here once, in listing order, as an immutable descriptor. The
registry carries no behavior; handlers are bound by name in ``tools.HANDLERS``.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Literal

ParamKind = Literal["string", "number", "boolean", "array", "object"]

_NO_DEFAULT: Any = object()


@dataclass(frozen=True, slots=True)
class ParamSpec:
    """One declared tool parameter."""

    name: str
    kind: ParamKind
    description: str
    required: bool = False
    default: Any = _NO_DEFAULT
    # Extra JSON-Schema keywords (items, properties, ...) rendered verbatim.
    schema: tuple[tuple[str, Any], ...] = ()

    @property
    def has_default(self) -> bool:
        return self.default is not _NO_DEFAULT

    def to_json_schema(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.kind, "description": self.description}
        if self.has_default:
            out["default"] = copy.deepcopy(self.default)
        # Callers may mutate the rendered schema; the descriptor must stay pristine.
        out.update(copy.deepcopy(dict(self.schema)))
        return out


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """Static metadata for a tool."""

    name: str
    description: str
    integration: str
    parameters: tuple[ParamSpec, ...] = field(default_factory=tuple)

    def param(self, name: str) -> ParamSpec | None:
        for p in self.parameters:
            if p.name == name:
                return p
        return None

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.parameters if p.required)

    def input_schema(self) -> dict[str, Any]:
        """Render the parameters as a JSON-Schema object."""
        return {
            "type": "object",
            "properties": {p.name: p.to_json_schema() for p in self.parameters},
            "required": list(self.required),
        }


def _str(name: str, description: str, *, required: bool = False, default: Any = _NO_DEFAULT) -> ParamSpec:
    return ParamSpec(name=name, kind="string", description=description, required=required, default=default)


def _num(name: str, description: str, *, default: Any = _NO_DEFAULT) -> ParamSpec:
    return ParamSpec(name=name, kind="number", description=description, default=default)


def _bool(name: str, description: str, *, default: Any = _NO_DEFAULT) -> ParamSpec:
    return ParamSpec(name=name, kind="boolean", description=description, default=default)


def _str_array(name: str, description: str, *, required: bool = False) -> ParamSpec:
    return ParamSpec(
        name=name,
        kind="array",
        description=description,
        required=required,
        schema=(("items", {"type": "string"}),),
    )


COMPACT = _bool("compact", "Return compact data with essential fields only", default=True)
COMPACT_JSON = _bool("compact_json", "Return non-formatted JSON to reduce token usage", default=True)
INCLUDE_PAGINATION = _bool("include_pagination", "Include pagination information in the response", default=False)
VERBOSE = _bool("verbose", "Enable verbose logging", default=False)

COMMON_OPTIONS: tuple[ParamSpec, ...] = (COMPACT, COMPACT_JSON, INCLUDE_PAGINATION, VERBOSE)
FORMAT_OPTIONS: tuple[ParamSpec, ...] = (COMPACT, COMPACT_JSON, VERBOSE)

_OWNER = _str("owner", "Repository owner (username or organization)", required=True)
_REPO = _str("repo", "Repository name", required=True)
_ISO_8601 = "(ISO 8601 format, e.g. 2023-01-01T00:00:00Z)"

_DATETIME_OBJECT = (
    ("properties", {
        "dateTime": {"type": "string", "description": "ISO 8601 date-time, e.g. 2023-01-01T10:00:00+09:00"},
        "timeZone": {"type": "string", "description": "IANA time zone, e.g. Asia/Tokyo"},
    }),
    ("required", ["dateTime"]),
)


TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="getStringLength",
        description="Get the length of a string",
        integration="core",
        parameters=(_str("input", "The input string", required=True),),
    ),
    ToolDescriptor(
        name="getGitHubRepoInfo",
        description="Get information about a GitHub repository",
        integration="github",
        parameters=(_OWNER, _REPO, *FORMAT_OPTIONS),
    ),
    ToolDescriptor(
        name="getGitHubRepoContents",
        description="Get contents (files and directories) from a GitHub repository",
        integration="github",
        parameters=(
            _OWNER,
            _REPO,
            _str("path", "Path to the file or directory (default: root directory)", default=""),
            _str("ref", "The name of the commit/branch/tag (default: default branch)", default=""),
            *FORMAT_OPTIONS,
        ),
    ),
    ToolDescriptor(
        name="getGitHubIssues",
        description="Get issues from a GitHub repository",
        integration="github",
        parameters=(
            _OWNER,
            _REPO,
            _str("state", "State of the issues (open, closed, all)", default="open"),
            _num("per_page", "Number of issues to return (max: 100)", default=30),
            *COMMON_OPTIONS,
        ),
    ),
    ToolDescriptor(
        name="getGitHubCommits",
        description="Get commit history from a GitHub repository",
        integration="github",
        parameters=(
            _OWNER,
            _REPO,
            _str("path", "Path to filter commits by (default: all files)", default=""),
            _num("per_page", "Number of commits to return (max: 100)", default=30),
            *COMMON_OPTIONS,
        ),
    ),
    ToolDescriptor(
        name="getGitHubPullRequests",
        description="Get pull requests from a GitHub repository",
        integration="github",
        parameters=(
            _OWNER,
            _REPO,
            _str("state", "State of the pull requests (open, closed, all)", default="open"),
            _str("sort", "What to sort results by (created, updated, popularity, long-running)", default="created"),
            _str("direction", "Direction to sort (asc or desc)", default="desc"),
            _num("per_page", "Number of pull requests to return (max: 100)", default=10),
            _str("since", f"Only show pull requests updated at or after this time {_ISO_8601}"),
            _str("created_after", f"Only show pull requests created at or after this time {_ISO_8601}"),
            _str("created_before", f"Only show pull requests created at or before this time {_ISO_8601}"),
            _str("updated_after", f"Only show pull requests updated at or after this time {_ISO_8601}"),
            _str("updated_before", f"Only show pull requests updated at or before this time {_ISO_8601}"),
            *COMMON_OPTIONS,
        ),
    ),
    ToolDescriptor(
        name="getGitHubUserInfo",
        description="Get information about the authenticated GitHub user",
        integration="github",
        parameters=FORMAT_OPTIONS,
    ),
    ToolDescriptor(
        name="getJiraProjectInfo",
        description="Get information about a JIRA project",
        integration="jira",
        parameters=(_str("projectKey", "JIRA project key (e.g., 'PROJ')", required=True), *COMMON_OPTIONS),
    ),
    ToolDescriptor(
        name="getJiraIssue",
        description="Get information about a JIRA issue",
        integration="jira",
        parameters=(_str("issueKey", "JIRA issue key (e.g., 'PROJ-123')", required=True), *COMMON_OPTIONS),
    ),
    ToolDescriptor(
        name="searchJiraIssues",
        description="Search for JIRA issues using JQL",
        integration="jira",
        parameters=(
            _str("jql", "JQL query string", required=True),
            _num("maxResults", "Maximum number of results to return", default=50),
            _num("startAt", "Index of the first result to return", default=0),
            _str_array("fields", "Fields to include in the response"),
            *COMMON_OPTIONS,
        ),
    ),
    ToolDescriptor(
        name="getJiraProjectIssues",
        description="Get issues for a JIRA project",
        integration="jira",
        parameters=(
            _str("projectKey", "JIRA project key (e.g., 'PROJ')", required=True),
            _str("status", "Filter issues by status (e.g., 'Done', 'In Progress')"),
            _num("maxResults", "Maximum number of results to return", default=50),
            _num("startAt", "Index of the first result to return", default=0),
            *COMMON_OPTIONS,
        ),
    ),
    ToolDescriptor(
        name="mapGitHubPrToJiraIssues",
        description="Map GitHub pull requests to JIRA issues based on PR title and description",
        integration="github+jira",
        parameters=(
            _str("owner", "GitHub repository owner (username or organization)", required=True),
            _str("repo", "GitHub repository name", required=True),
            _str("projectKey", "JIRA project key to filter issues (e.g., 'PROJ')", required=True),
            _str("since", "Only include PRs updated after this date (ISO 8601 format)"),
            _num("maxResults", "Maximum number of PRs to process", default=30),
            *FORMAT_OPTIONS,
        ),
    ),
    ToolDescriptor(
        name="generateDashboardSummary",
        description="Generate a development status dashboard summary",
        integration="github+jira",
        parameters=(
            _str("owner", "GitHub repository owner (username or organization)", required=True),
            _str_array("repos", "List of GitHub repository names", required=True),
            _str_array("projectKeys", "List of JIRA project keys", required=True),
            _str("period", "Time period for the summary (day, week, month, quarter, year)", default="month"),
            *FORMAT_OPTIONS,
        ),
    ),
    ToolDescriptor(
        name="slack_list_channels",
        description="List public channels in the Slack workspace with pagination",
        integration="slack",
        parameters=(
            _num("limit", "Maximum number of channels to return (default 100, max 200)", default=100),
            _str("cursor", "Pagination cursor for next page of results"),
            _bool("member_only", "Only return channels where the bot is a member", default=False),
        ),
    ),
    ToolDescriptor(
        name="slack_post_message",
        description="Post a new message to a Slack channel",
        integration="slack",
        parameters=(
            _str("channel_id", "The ID of the channel to post to", required=True),
            _str("text", "The message text to post", required=True),
        ),
    ),
    ToolDescriptor(
        name="slack_user_conversations",
        description="List channels that a user is a member of",
        integration="slack",
        parameters=(
            _str("user_id", "The ID of the user to get conversations for", required=True),
            _num("limit", "Maximum number of channels to return (default 100, max 200)", default=100),
            _str("cursor", "Pagination cursor for next page of results"),
        ),
    ),
    ToolDescriptor(
        name="slack_get_channel_history",
        description="Get conversation history from a channel by name",
        integration="slack",
        parameters=(
            _str("channel_name", "The name of the channel (with or without # prefix)", required=True),
            _num("limit", "Maximum number of messages to return (default 10, max 100)", default=10),
            _str("cursor", "Pagination cursor for next page of results"),
            COMPACT,
            COMPACT_JSON,
        ),
    ),
    ToolDescriptor(
        name="slack_get_thread_replies",
        description="Get replies in a thread by channel name and thread timestamp",
        integration="slack",
        parameters=(
            _str("channel_name", "The name of the channel (with or without # prefix)", required=True),
            _str("thread_ts", "The timestamp of the parent message in the format '1234567890.123456'", required=True),
            _num("limit", "Maximum number of messages to return (default 10, max 100)", default=10),
            COMPACT,
            COMPACT_JSON,
        ),
    ),
    ToolDescriptor(
        name="google_calendar_get_events",
        description="Get Google Calendar events for a time range, with optional filtering",
        integration="google_calendar",
        parameters=(
            _str("calendarId", "Calendar ID (default 'primary')", default="primary"),
            _str("timeMin", f"Range start {_ISO_8601}"),
            _str("timeMax", f"Range end {_ISO_8601}"),
            _num("maxResults", "Maximum number of events (default 10, max 100)", default=10),
            _str("q", "Free-text search over event title, description and other fields"),
            _bool("singleEvents", "Expand recurring events into single instances", default=True),
            _str("orderBy", "Ordering (startTime, updated)", default="startTime"),
            _bool("filterByAttendees", "Only return events that have attendees", default=False),
            COMPACT,
            COMPACT_JSON,
        ),
    ),
    ToolDescriptor(
        name="google_calendar_create_event",
        description="Create a new Google Calendar event",
        integration="google_calendar",
        parameters=(
            _str("calendarId", "Calendar ID (default 'primary')", default="primary"),
            _str("summary", "Event title", required=True),
            _str("description", "Event description"),
            _str("location", "Event location"),
            ParamSpec(name="start", kind="object", description="Start time", required=True, schema=_DATETIME_OBJECT),
            ParamSpec(name="end", kind="object", description="End time", required=True, schema=_DATETIME_OBJECT),
            ParamSpec(
                name="attendees",
                kind="array",
                description="Attendee list",
                schema=(
                    ("items", {
                        "type": "object",
                        "properties": {
                            "email": {"type": "string", "description": "Attendee email address"},
                            "optional": {"type": "boolean", "description": "Whether attendance is optional"},
                        },
                        "required": ["email"],
                    }),
                ),
            ),
            ParamSpec(
                name="reminders",
                kind="object",
                description="Reminder settings",
                schema=(
                    ("properties", {
                        "useDefault": {"type": "boolean", "description": "Use the calendar's default reminders"},
                        "overrides": {
                            "type": "array",
                            "description": "Custom reminders",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "method": {"type": "string", "description": "email or popup"},
                                    "minutes": {"type": "number", "description": "Minutes before the event start"},
                                },
                                "required": ["method", "minutes"],
                            },
                        },
                    }),
                ),
            ),
        ),
    ),
)

_BY_NAME: dict[str, ToolDescriptor] = {t.name: t for t in TOOLS}


def list_tools() -> tuple[ToolDescriptor, ...]:
    """Return every descriptor in declared order."""
    return TOOLS


def get_tool(name: str) -> ToolDescriptor | None:
    """Look up a descriptor by tool name."""
    return _BY_NAME.get(name)
