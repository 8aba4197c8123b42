"""GitHub repository, issue, commit, pull request and user tools."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from ..clients import Clients
from ..compaction import add_list_pagination, compact, render
from ..errors import SafeError
from ..extractors import ResourceKind
from ..validation import ValidatedArguments

logger = logging.getLogger(__name__)

# Search qualifiers for the date-filtered pull request query, in query order.
_DATE_FILTERS = (
    ("created_after", "created:>="),
    ("created_before", "created:<="),
    ("updated_after", "updated:>="),
    ("updated_before", "updated:<="),
)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 date or date-time; naive values are taken as UTC."""
    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _utc_date(name: str, value: str) -> str:
    # Only presence and primitive type are protocol errors; a bad date is reported in the result.
    try:
        return parse_timestamp(value).date().isoformat()
    except ValueError as exc:
        raise SafeError(code="GitHub", message=f"Invalid {name}: {value!r} is not an ISO 8601 date-time") from exc


def build_pr_search_query(owner: str, repo: str, state: str, args: ValidatedArguments) -> str:
    """Build the issue-search query used when any created/updated filter is present."""
    parts = [f"repo:{owner}/{repo}", "is:pr"]
    if state != "all":
        parts.append(f"state:{state}")
    for name, qualifier in _DATE_FILTERS:
        value = args.get_str(name)
        if value:
            parts.append(f"{qualifier}{_utc_date(name, value)}")
    return " ".join(parts)


def _shape_listing(data: Any, kind: ResourceKind, args: ValidatedArguments, per_page: int) -> Any:
    shaped = compact(data, kind, args.options)
    if args.options.include_pagination:
        shaped = add_list_pagination(shaped, page=1, per_page=per_page)
    return shaped


async def tool_get_repo_info(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    owner = args.require_str("owner")
    repo = args.require_str("repo")
    logger.log(args.log_level, "getGitHubRepoInfo: %s/%s", owner, repo)

    data = await clients.github.request_json(method="GET", path=f"/repos/{owner}/{repo}")
    return render(compact(data, ResourceKind.REPOSITORY, args.options), args.options)


async def tool_get_repo_contents(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    owner = args.require_str("owner")
    repo = args.require_str("repo")
    path = (args.get_str("path") or "").strip("/")
    ref = args.get_str("ref")
    logger.log(args.log_level, "getGitHubRepoContents: %s/%s path=%r", owner, repo, path)

    api_path = f"/repos/{owner}/{repo}/contents"
    if path:
        api_path += f"/{path}"
    params = {"ref": ref} if ref else None
    data = await clients.github.request_json(method="GET", path=api_path, params=params)
    return render(compact(data, ResourceKind.REPO_CONTENT, args.options), args.options)


async def tool_get_issues(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    owner = args.require_str("owner")
    repo = args.require_str("repo")
    state = args.get_str("state") or "open"
    per_page = args.get_int("per_page") or 30
    logger.log(args.log_level, "getGitHubIssues: %s/%s state=%s per_page=%d", owner, repo, state, per_page)

    data = await clients.github.request_json(
        method="GET",
        path=f"/repos/{owner}/{repo}/issues",
        params={"state": state, "per_page": str(per_page)},
    )
    return render(_shape_listing(data, ResourceKind.ISSUE, args, per_page), args.options)


async def tool_get_commits(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    owner = args.require_str("owner")
    repo = args.require_str("repo")
    path = args.get_str("path")
    per_page = args.get_int("per_page") or 30
    logger.log(args.log_level, "getGitHubCommits: %s/%s per_page=%d", owner, repo, per_page)

    params = {"per_page": str(per_page)}
    if path:
        params["path"] = path
    data = await clients.github.request_json(method="GET", path=f"/repos/{owner}/{repo}/commits", params=params)
    return render(_shape_listing(data, ResourceKind.COMMIT, args, per_page), args.options)


async def tool_get_pull_requests(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    owner = args.require_str("owner")
    repo = args.require_str("repo")
    state = args.get_str("state") or "open"
    sort = args.get_str("sort") or "created"
    direction = args.get_str("direction") or "desc"
    per_page = args.get_int("per_page") or 10

    if any(args.get_str(name) for name, _ in _DATE_FILTERS):
        query = build_pr_search_query(owner, repo, state, args)
        logger.log(args.log_level, "getGitHubPullRequests: search q=%r", query)
        data = await clients.github.request_json(
            method="GET",
            path="/search/issues",
            params={"q": query, "sort": sort, "order": direction, "per_page": str(per_page)},
        )
    else:
        params = {"state": state, "sort": sort, "direction": direction, "per_page": str(per_page)}
        since = args.get_str("since")
        if since:
            params["since"] = since
        logger.log(args.log_level, "getGitHubPullRequests: %s/%s %s", owner, repo, params)
        data = await clients.github.request_json(method="GET", path=f"/repos/{owner}/{repo}/pulls", params=params)

    return render(_shape_listing(data, ResourceKind.PULL_REQUEST, args, per_page), args.options)


async def tool_get_user_info(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    logger.log(args.log_level, "getGitHubUserInfo (authenticated=%s)", clients.github.authenticated)
    data = await clients.github.request_json(method="GET", path="/user")
    return render(compact(data, ResourceKind.USER, args.options), args.options)
