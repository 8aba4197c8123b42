"""Tool handlers, bound to registry names."""

from __future__ import annotations

from . import calendar_tools, github_tools, integration_tools, jira_tools, slack_tools, string_tools

HANDLERS = {
    "getStringLength": string_tools.tool_get_string_length,
    "getGitHubRepoInfo": github_tools.tool_get_repo_info,
    "getGitHubRepoContents": github_tools.tool_get_repo_contents,
    "getGitHubIssues": github_tools.tool_get_issues,
    "getGitHubCommits": github_tools.tool_get_commits,
    "getGitHubPullRequests": github_tools.tool_get_pull_requests,
    "getGitHubUserInfo": github_tools.tool_get_user_info,
    "getJiraProjectInfo": jira_tools.tool_get_project_info,
    "getJiraIssue": jira_tools.tool_get_issue,
    "searchJiraIssues": jira_tools.tool_search_issues,
    "getJiraProjectIssues": jira_tools.tool_get_project_issues,
    "mapGitHubPrToJiraIssues": integration_tools.tool_map_prs_to_jira_issues,
    "generateDashboardSummary": integration_tools.tool_generate_dashboard_summary,
    "slack_list_channels": slack_tools.tool_list_channels,
    "slack_post_message": slack_tools.tool_post_message,
    "slack_user_conversations": slack_tools.tool_user_conversations,
    "slack_get_channel_history": slack_tools.tool_get_channel_history,
    "slack_get_thread_replies": slack_tools.tool_get_thread_replies,
    "google_calendar_get_events": calendar_tools.tool_get_events,
    "google_calendar_create_event": calendar_tools.tool_create_event,
}
