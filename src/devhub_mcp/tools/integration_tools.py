"""Tools that combine GitHub and JIRA data."""

from __future__ import annotations

import calendar
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any

from ..clients import Clients
from ..compaction import compact, render
from ..errors import SafeError
from ..extractors import RICH_TEXT_PLACEHOLDER, ResourceKind
from ..validation import ValidatedArguments
from .github_tools import parse_timestamp

logger = logging.getLogger(__name__)

JIRA_KEY_RE = re.compile(r"[A-Z0-9]+-\d+")

COMPLETED_STATUSES = frozenset({"Done", "Closed", "Resolved"})
PERIODS = ("day", "week", "month", "quarter", "year")

_MAPPING_FIELDS = ["summary", "status", "assignee", "priority"]
_DASHBOARD_FIELDS = ["summary", "status", "assignee", "priority", "created", "updated"]


def extract_jira_keys(text: str) -> list[str]:
    """Return distinct JIRA issue keys in order of first appearance."""
    return list(dict.fromkeys(JIRA_KEY_RE.findall(text)))


def _pr_jira_keys(pr: dict[str, Any]) -> list[str]:
    title = pr.get("title") if isinstance(pr.get("title"), str) else ""
    body = pr.get("body")
    if not isinstance(body, str):
        body = RICH_TEXT_PLACEHOLDER if body else ""
    return extract_jira_keys(f"{title}\n{body}")


def _shift_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def date_range(period: str, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the (start, end) window ending now for a named period; unknown periods mean a month."""
    end = now or datetime.now(timezone.utc)
    if period == "day":
        return end - timedelta(days=1), end
    if period == "week":
        return end - timedelta(days=7), end
    if period == "quarter":
        return _shift_months(end, -3), end
    if period == "year":
        return _shift_months(end, -12), end
    return _shift_months(end, -1), end


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="seconds").replace("+00:00", "Z")


def completion_rate(completed: int, total: int) -> str:
    if total <= 0:
        return "0%"
    return f"{completed / total * 100:.2f}%"


def _in_window(value: Any, start: datetime, end: datetime) -> bool:
    if not isinstance(value, str):
        return False
    try:
        moment = parse_timestamp(value)
    except ValueError:
        return False
    return start <= moment <= end


def _issues_of(data: Any) -> list[Any]:
    if isinstance(data, dict) and isinstance(data.get("issues"), list):
        return data["issues"]
    return []


def _login(obj: Any) -> str | None:
    if isinstance(obj, dict) and isinstance(obj.get("login"), str):
        return obj["login"]
    return None


async def _fetch_mapped_issues(clients: Clients, keys: list[str], args: ValidatedArguments) -> dict[str, dict[str, Any]]:
    """Look up issue details; JIRA being unavailable leaves the map empty."""
    if not keys:
        return {}
    try:
        data = await clients.jira.search(jql=f"key in ({','.join(keys)})", max_results=100, fields=_MAPPING_FIELDS)
    except SafeError as err:
        logger.log(args.log_level, "JIRA lookup skipped: %s", err.describe())
        return {}

    found: dict[str, dict[str, Any]] = {}
    for issue in _issues_of(data):
        if not isinstance(issue, dict) or not isinstance(issue.get("key"), str):
            continue
        fields = issue.get("fields") if isinstance(issue.get("fields"), dict) else {}
        status = fields.get("status")
        assignee = fields.get("assignee")
        priority = fields.get("priority")
        found[issue["key"]] = {
            "key": issue["key"],
            "summary": fields.get("summary"),
            "status": status.get("name") if isinstance(status, dict) else None,
            "assignee": assignee.get("displayName") if isinstance(assignee, dict) else None,
            "priority": priority.get("name") if isinstance(priority, dict) else None,
        }
    return found


async def tool_map_prs_to_jira_issues(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    owner = args.require_str("owner")
    repo = args.require_str("repo")
    project_key = args.require_str("projectKey")
    max_results = args.get_int("maxResults") or 30
    logger.log(args.log_level, "mapGitHubPrToJiraIssues: %s/%s -> %s", owner, repo, project_key)

    params = {"state": "all", "sort": "updated", "direction": "desc", "per_page": str(max_results)}
    since = args.get_str("since")
    if since:
        params["since"] = since
    prs = await clients.github.request_json(method="GET", path=f"/repos/{owner}/{repo}/pulls", params=params)
    if not isinstance(prs, list):
        raise SafeError(code="GitHub", message="Unexpected pull requests response")

    prefix = f"{project_key}-"
    mappings: list[dict[str, Any]] = []
    all_keys: list[str] = []
    for pr in prs:
        if not isinstance(pr, dict):
            continue
        keys = [k for k in _pr_jira_keys(pr) if k.startswith(prefix)]
        if not keys:
            continue
        mappings.append(
            {
                "pr_number": pr.get("number"),
                "pr_title": pr.get("title"),
                "pr_state": pr.get("state"),
                "pr_url": pr.get("html_url"),
                "pr_created_at": pr.get("created_at"),
                "pr_updated_at": pr.get("updated_at"),
                "pr_merged_at": pr.get("merged_at"),
                "pr_user": _login(pr.get("user")),
                "jira_keys": keys,
            }
        )
        all_keys.extend(k for k in keys if k not in all_keys)

    issues = await _fetch_mapped_issues(clients, all_keys, args)
    for mapping in mappings:
        mapping["jira_issues"] = [issues.get(k, {"key": k}) for k in mapping["jira_keys"]]

    result = {
        "repository": f"{owner}/{repo}",
        "jira_project": project_key,
        "total_mapped_prs": len(mappings),
        "total_jira_issues": len(all_keys),
        "mappings": mappings,
    }
    return render(compact(result, ResourceKind.PR_ISSUE_MAPPING, args.options), args.options)


async def _repo_activity(
    clients: Clients, owner: str, repo: str, start: datetime, end: datetime
) -> tuple[list[dict[str, Any]], list[Any]]:
    prs = await clients.github.request_json(
        method="GET",
        path=f"/repos/{owner}/{repo}/pulls",
        params={"state": "all", "sort": "updated", "direction": "desc", "per_page": "100"},
    )
    commits = await clients.github.request_json(
        method="GET",
        path=f"/repos/{owner}/{repo}/commits",
        params={"since": _iso(start), "until": _iso(end), "per_page": "100"},
    )
    if not isinstance(prs, list) or not isinstance(commits, list):
        raise SafeError(code="GitHub", message="Unexpected listing response")
    recent = [pr for pr in prs if isinstance(pr, dict) and _in_window(pr.get("updated_at"), start, end)]
    return recent, commits


async def tool_generate_dashboard_summary(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    owner = args.require_str("owner")
    repos = [r for r in args.get_list("repos") or [] if isinstance(r, str)]
    project_keys = [p for p in args.get_list("projectKeys") or [] if isinstance(p, str)]
    period = args.get_str("period") or "month"
    if period not in PERIODS:
        period = "month"
    start, end = date_range(period)
    logger.log(args.log_level, "generateDashboardSummary: %s repos=%s projects=%s period=%s", owner, repos, project_keys, period)

    repo_stats: list[dict[str, Any]] = []
    contributors: dict[str, dict[str, int]] = {}
    total_prs = 0
    total_commits = 0
    for repo in repos:
        try:
            prs, commits = await _repo_activity(clients, owner, repo, start, end)
        except SafeError as err:
            logger.log(args.log_level, "Skipping %s/%s: %s", owner, repo, err.describe())
            continue

        for pr in prs:
            author = _login(pr.get("user"))
            if author:
                contributors.setdefault(author, {"prs": 0, "commits": 0})["prs"] += 1
        for commit in commits:
            author = _login(commit.get("author")) if isinstance(commit, dict) else None
            if author:
                contributors.setdefault(author, {"prs": 0, "commits": 0})["commits"] += 1

        repo_stats.append({"repo": f"{owner}/{repo}", "pr_count": len(prs), "commit_count": len(commits)})
        total_prs += len(prs)
        total_commits += len(commits)

    project_stats: list[dict[str, Any]] = []
    total_issues = 0
    completed_issues = 0
    start_day = start.date().isoformat()
    end_day = end.date().isoformat()
    for project_key in project_keys:
        jql = f'project = {project_key} AND updated >= "{start_day}" AND updated <= "{end_day}" ORDER BY updated DESC'
        try:
            data = await clients.jira.search(jql=jql, max_results=100, fields=_DASHBOARD_FIELDS)
        except SafeError as err:
            logger.log(args.log_level, "Skipping JIRA project %s: %s", project_key, err.describe())
            continue

        issues = [i for i in _issues_of(data) if isinstance(i, dict)]
        completed = 0
        for issue in issues:
            fields = issue.get("fields")
            status = fields.get("status") if isinstance(fields, dict) else None
            if isinstance(status, dict) and status.get("name") in COMPLETED_STATUSES:
                completed += 1
        project_stats.append({"project_key": project_key, "total_issues": len(issues), "completed_issues": completed})
        total_issues += len(issues)
        completed_issues += completed

    contributor_summary = sorted(
        (
            {
                "name": name,
                "prs": stats["prs"],
                "commits": stats["commits"],
                "total_contributions": stats["prs"] + stats["commits"],
            }
            for name, stats in contributors.items()
        ),
        key=lambda c: c["total_contributions"],
        reverse=True,
    )

    summary = {
        "period": {"type": period, "start_date": _iso(start), "end_date": _iso(end)},
        "github_summary": {"total_prs": total_prs, "total_commits": total_commits, "repositories": repo_stats},
        "jira_summary": {
            "total_issues": total_issues,
            "completed_issues": completed_issues,
            "completion_rate": completion_rate(completed_issues, total_issues),
            "projects": project_stats,
        },
        "contributor_summary": contributor_summary,
    }
    return render(compact(summary, ResourceKind.DASHBOARD_SUMMARY, args.options), args.options)
