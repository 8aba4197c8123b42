"""Contract tests for the tool registry and its JSON-Schema rendering."""

from __future__ import annotations

from devhub_mcp.registry import get_tool, list_tools
from devhub_mcp.tools import HANDLERS

EXPECTED_ORDER = [
    "getStringLength",
    "getGitHubRepoInfo",
    "getGitHubRepoContents",
    "getGitHubIssues",
    "getGitHubCommits",
    "getGitHubPullRequests",
    "getGitHubUserInfo",
    "getJiraProjectInfo",
    "getJiraIssue",
    "searchJiraIssues",
    "getJiraProjectIssues",
    "mapGitHubPrToJiraIssues",
    "generateDashboardSummary",
    "slack_list_channels",
    "slack_post_message",
    "slack_user_conversations",
    "slack_get_channel_history",
    "slack_get_thread_replies",
    "google_calendar_get_events",
    "google_calendar_create_event",
]


def test_tools_are_listed_in_declared_order_and_unique() -> None:
    names = [t.name for t in list_tools()]
    assert names == EXPECTED_ORDER
    assert len(set(names)) == len(names)


def test_listing_is_stable_across_calls() -> None:
    assert list_tools() is list_tools()


def test_every_tool_has_a_handler_and_no_handler_is_orphaned() -> None:
    assert set(HANDLERS) == set(EXPECTED_ORDER)


def test_input_schema_shape_for_every_tool() -> None:
    for tool in list_tools():
        schema = tool.input_schema()
        assert schema["type"] == "object"
        assert isinstance(schema["properties"], dict)
        assert set(schema["required"]) <= set(schema["properties"])
        for prop in schema["properties"].values():
            assert prop["type"] in {"string", "number", "boolean", "array", "object"}
            assert prop["description"]


def test_get_string_length_schema() -> None:
    tool = get_tool("getStringLength")
    assert tool is not None
    assert tool.input_schema() == {
        "type": "object",
        "properties": {"input": {"type": "string", "description": "The input string"}},
        "required": ["input"],
    }


def test_common_options_are_declared_with_defaults() -> None:
    tool = get_tool("getGitHubIssues")
    assert tool is not None
    props = tool.input_schema()["properties"]

    assert props["compact"]["default"] is True
    assert props["compact_json"]["default"] is True
    assert props["include_pagination"]["default"] is False
    assert props["verbose"]["default"] is False
    assert props["per_page"]["default"] == 30
    assert tool.required == ("owner", "repo")


def test_array_parameters_declare_item_types() -> None:
    tool = get_tool("generateDashboardSummary")
    assert tool is not None
    props = tool.input_schema()["properties"]

    assert props["repos"] == {"type": "array", "description": "List of GitHub repository names", "items": {"type": "string"}}
    assert tool.required == ("owner", "repos", "projectKeys")


def test_pull_request_tool_declares_date_filters() -> None:
    tool = get_tool("getGitHubPullRequests")
    assert tool is not None
    for name in ("since", "created_after", "created_before", "updated_after", "updated_before"):
        spec = tool.param(name)
        assert spec is not None
        assert spec.kind == "string"
        assert spec.has_default is False


def test_unknown_tool_lookup_returns_none() -> None:
    assert get_tool("nonExistentTool") is None


def test_rendered_schema_mutation_does_not_leak_into_registry() -> None:
    tool = get_tool("google_calendar_create_event")
    assert tool is not None

    first = tool.input_schema()
    first["properties"]["start"]["properties"]["dateTime"]["type"] = "integer"
    first["properties"]["end"]["required"].append("timeZone")

    fresh = tool.input_schema()
    assert fresh["properties"]["start"]["properties"]["dateTime"]["type"] == "string"
    assert fresh["properties"]["end"]["required"] == ["dateTime"]
