"""JIRA project, issue and JQL search tools."""

from __future__ import annotations

import logging
from typing import Any

from ..clients import Clients
from ..compaction import add_counted_pagination, compact, render
from ..extractors import ResourceKind
from ..validation import ValidatedArguments

logger = logging.getLogger(__name__)


def project_issues_jql(project_key: str, status: str | None) -> str:
    jql = f"project = {project_key}"
    if status:
        jql += f' AND status = "{status}"'
    return jql + " ORDER BY created DESC"


async def _search(clients: Clients, args: ValidatedArguments, *, jql: str, fields: list[str] | None = None) -> dict[str, Any]:
    max_results = args.get_int("maxResults") or 50
    start_at = args.get_int("startAt") or 0
    logger.log(args.log_level, "JQL search: %s (maxResults=%d, startAt=%d)", jql, max_results, start_at)

    data = await clients.jira.search(jql=jql, max_results=max_results, start_at=start_at, fields=fields)
    shaped = compact(data, ResourceKind.JIRA_SEARCH_RESULT, args.options)
    if args.options.include_pagination:
        total = data.get("total") if isinstance(data, dict) else None
        shaped = add_counted_pagination(shaped, start_at=start_at, max_results=max_results, total=total)
    return render(shaped, args.options)


async def tool_get_project_info(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    project_key = args.require_str("projectKey")
    logger.log(args.log_level, "getJiraProjectInfo: %s", project_key)
    data = await clients.jira.request_json(method="GET", path=f"/project/{project_key}")
    return render(compact(data, ResourceKind.JIRA_PROJECT, args.options), args.options)


async def tool_get_issue(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    issue_key = args.require_str("issueKey")
    logger.log(args.log_level, "getJiraIssue: %s", issue_key)
    data = await clients.jira.request_json(method="GET", path=f"/issue/{issue_key}")
    return render(compact(data, ResourceKind.JIRA_ISSUE, args.options), args.options)


async def tool_search_issues(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    fields = [f for f in args.get_list("fields") or [] if isinstance(f, str)]
    return await _search(clients, args, jql=args.require_str("jql"), fields=fields or None)


async def tool_get_project_issues(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    jql = project_issues_jql(args.require_str("projectKey"), args.get_str("status"))
    return await _search(clients, args, jql=jql)
