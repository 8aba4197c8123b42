"""Essential-field extractors.

One pure function per resource kind reduces an upstream JSON object to the fields worth
sending to an agent: identity, human-facing summary, lifecycle timestamps, a minimal actor
reference (login or displayName only) and kind-specific status/labels.

Extractors are total. Missing or oddly typed upstream fields become None or are omitted;
they never raise. Each extractor also accepts its own output and returns it unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

TRUNCATE_AT = 200
ELLIPSIS = "..."
RICH_TEXT_PLACEHOLDER = "[rich text content]"


class ResourceKind(Enum):
    """Closed set of upstream resource kinds with an essential shape."""

    REPOSITORY = "repository"
    REPO_CONTENT = "repo_content"
    ISSUE = "issue"
    COMMIT = "commit"
    PULL_REQUEST = "pull_request"
    USER = "user"
    CALENDAR_EVENT = "calendar_event"
    CHAT_MESSAGE = "chat_message"
    CHAT_THREAD_MESSAGE = "chat_thread_message"
    JIRA_PROJECT = "jira_project"
    JIRA_ISSUE = "jira_issue"
    JIRA_SEARCH_RESULT = "jira_search_result"
    PR_ISSUE_MAPPING = "pr_issue_mapping"
    DASHBOARD_SUMMARY = "dashboard_summary"


def truncate_text(value: Any) -> Any:
    """Shorten freeform text to TRUNCATE_AT characters plus an ellipsis.

    Non-string, non-null bodies (structured rich text) become a fixed placeholder.
    """
    if value is None:
        return None
    if isinstance(value, str):
        if len(value) > TRUNCATE_AT:
            return value[:TRUNCATE_AT] + ELLIPSIS
        return value
    return RICH_TEXT_PLACEHOLDER


def _obj(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _ref(value: Any, key: str) -> dict[str, Any] | None:
    """Reduce a nested actor/category object to ``{key: value}``."""
    if not isinstance(value, dict):
        return None
    return {key: value.get(key)}


def _names(value: Any) -> list[Any]:
    """Label-like lists: ``[{"name": "bug"}]`` and ``["bug"]`` both become ``["bug"]``."""
    out: list[Any] = []
    for item in _list(value):
        if isinstance(item, dict):
            out.append(item.get("name"))
        elif isinstance(item, str):
            out.append(item)
    return out


def _logins(value: Any) -> list[Any]:
    out: list[Any] = []
    for item in _list(value):
        if isinstance(item, dict):
            out.append(item.get("login"))
        elif isinstance(item, str):
            out.append(item)
    return out


def extract_repository(repo: Any) -> dict[str, Any]:
    r = _obj(repo)
    return {
        "id": r.get("id"),
        "name": r.get("name"),
        "full_name": r.get("full_name"),
        "owner": _ref(r.get("owner"), "login"),
        "description": r.get("description"),
        "private": r.get("private"),
        "html_url": r.get("html_url"),
        "default_branch": r.get("default_branch"),
        "language": r.get("language"),
        "topics": list(_list(r.get("topics"))),
        "archived": r.get("archived"),
        "fork": r.get("fork"),
        "stargazers_count": r.get("stargazers_count"),
        "forks_count": r.get("forks_count"),
        "open_issues_count": r.get("open_issues_count"),
        "created_at": r.get("created_at"),
        "updated_at": r.get("updated_at"),
        "pushed_at": r.get("pushed_at"),
    }


def extract_repo_content(entry: Any) -> dict[str, Any]:
    e = _obj(entry)
    out: dict[str, Any] = {
        "name": e.get("name"),
        "path": e.get("path"),
        "type": e.get("type"),
        "size": e.get("size"),
        "sha": e.get("sha"),
        "html_url": e.get("html_url"),
    }
    # Directory listings carry no content; a single fetched file keeps it.
    if e.get("type") == "file" and "content" in e:
        out["encoding"] = e.get("encoding")
        out["content"] = e.get("content")
    return out


def extract_issue(issue: Any) -> dict[str, Any]:
    i = _obj(issue)
    if "is_pull_request" in i:
        is_pr = i.get("is_pull_request") is True
    else:
        is_pr = i.get("pull_request") is not None
    return {
        "number": i.get("number"),
        "title": i.get("title"),
        "state": i.get("state"),
        "user": _ref(i.get("user"), "login"),
        "assignees": _logins(i.get("assignees")),
        "labels": _names(i.get("labels")),
        "comments": i.get("comments"),
        "created_at": i.get("created_at"),
        "updated_at": i.get("updated_at"),
        "closed_at": i.get("closed_at"),
        "html_url": i.get("html_url"),
        "body": truncate_text(i.get("body")),
        "is_pull_request": is_pr,
    }


def extract_commit(commit: Any) -> dict[str, Any]:
    c = _obj(commit)
    detail = _obj(c.get("commit"))
    git_author = _obj(detail.get("author"))
    if detail:
        message = detail.get("message")
        author_name = git_author.get("name")
        date = git_author.get("date")
    else:
        message = c.get("message")
        author_name = c.get("author_name")
        date = c.get("date")
    return {
        "sha": c.get("sha"),
        "message": truncate_text(message),
        "author_name": author_name,
        "author": _ref(c.get("author"), "login"),
        "date": date,
        "html_url": c.get("html_url"),
    }


def extract_pull_request(pr: Any) -> dict[str, Any]:
    p = _obj(pr)
    return {
        "number": p.get("number"),
        "title": p.get("title"),
        "state": p.get("state"),
        "created_at": p.get("created_at"),
        "updated_at": p.get("updated_at"),
        "merged_at": p.get("merged_at"),
        "user": _ref(p.get("user"), "login"),
        "additions": p.get("additions"),
        "deletions": p.get("deletions"),
        "changed_files": p.get("changed_files"),
        "labels": _names(p.get("labels")),
        "html_url": p.get("html_url"),
    }


def extract_user(user: Any) -> dict[str, Any]:
    u = _obj(user)
    return {
        "login": u.get("login"),
        "id": u.get("id"),
        "name": u.get("name"),
        "type": u.get("type"),
        "company": u.get("company"),
        "location": u.get("location"),
        "email": u.get("email"),
        "bio": truncate_text(u.get("bio")),
        "public_repos": u.get("public_repos"),
        "followers": u.get("followers"),
        "following": u.get("following"),
        "html_url": u.get("html_url"),
        "created_at": u.get("created_at"),
    }


def extract_calendar_event(event: Any) -> dict[str, Any]:
    e = _obj(event)
    out: dict[str, Any] = {
        "id": e.get("id"),
        "summary": e.get("summary"),
        "start": e.get("start"),
        "end": e.get("end"),
        "status": e.get("status"),
    }
    for key in ("description", "location", "created", "updated"):
        if e.get(key):
            out[key] = e[key]

    attendees = _list(e.get("attendees"))
    if attendees:
        out["attendees"] = [
            {
                "email": _obj(a).get("email"),
                "responseStatus": _obj(a).get("responseStatus"),
                "optional": _obj(a).get("optional") or False,
            }
            for a in attendees
        ]

    reminders = _obj(e.get("reminders"))
    if reminders.get("overrides"):
        out["reminders"] = {
            "useDefault": reminders.get("useDefault"),
            "overrides": reminders.get("overrides"),
        }
    return out


def _message_extras(m: dict[str, Any], out: dict[str, Any]) -> dict[str, Any]:
    reactions = _list(m.get("reactions"))
    if reactions:
        out["reactions"] = [{"name": _obj(r).get("name"), "count": _obj(r).get("count")} for r in reactions]

    files = _list(m.get("files"))
    if files:
        out["has_files"] = True
        out["file_count"] = len(files)
    elif m.get("has_files"):
        out["has_files"] = True
        out["file_count"] = m.get("file_count")

    attachments = _list(m.get("attachments"))
    if attachments:
        out["has_attachments"] = True
        out["attachment_count"] = len(attachments)
    elif m.get("has_attachments"):
        out["has_attachments"] = True
        out["attachment_count"] = m.get("attachment_count")
    return out


def extract_chat_message(message: Any) -> dict[str, Any]:
    m = _obj(message)
    out: dict[str, Any] = {
        "user": m.get("user"),
        "text": m.get("text"),
        "ts": m.get("ts"),
        "type": m.get("type"),
    }
    if m.get("thread_ts"):
        out["thread_ts"] = m["thread_ts"]
        if m.get("reply_count"):
            out["reply_count"] = m["reply_count"]
    return _message_extras(m, out)


def extract_chat_thread_message(message: Any) -> dict[str, Any]:
    m = _obj(message)
    out: dict[str, Any] = {
        "user": m.get("user"),
        "text": m.get("text"),
        "ts": m.get("ts"),
        "type": m.get("type"),
    }
    if m.get("is_parent") is True or (m.get("thread_ts") and m.get("thread_ts") == m.get("ts")):
        out["is_parent"] = True
    return _message_extras(m, out)


def extract_jira_project(project: Any) -> dict[str, Any]:
    p = _obj(project)
    return {
        "id": p.get("id"),
        "key": p.get("key"),
        "name": p.get("name"),
        "description": p.get("description"),
        "lead": _ref(p.get("lead"), "displayName"),
        "url": p.get("self", p.get("url")),
        "projectCategory": _ref(p.get("projectCategory"), "name"),
        "issueTypes": [{"name": _obj(t).get("name")} for t in _list(p.get("issueTypes"))],
    }


def extract_jira_issue(issue: Any) -> dict[str, Any]:
    i = _obj(issue)
    # Raw issues nest everything under "fields"; reduced issues are flat.
    f = _obj(i.get("fields")) if "fields" in i else i
    return {
        "id": i.get("id"),
        "key": i.get("key"),
        "summary": f.get("summary"),
        "description": truncate_text(f.get("description")) if f.get("description") else None,
        "status": _ref(f.get("status"), "name"),
        "priority": _ref(f.get("priority"), "name"),
        "assignee": _ref(f.get("assignee"), "displayName"),
        "reporter": _ref(f.get("reporter"), "displayName"),
        "created": f.get("created"),
        "updated": f.get("updated"),
        "labels": list(_list(f.get("labels"))),
        "issueType": _ref(f.get("issuetype", f.get("issueType")), "name"),
    }


def extract_jira_search_result(result: Any) -> dict[str, Any]:
    r = _obj(result)
    return {
        "total": r.get("total"),
        "issues": [extract_jira_issue(i) for i in _list(r.get("issues"))],
    }


def _mapped_jira_issue(issue: Any) -> dict[str, Any]:
    i = _obj(issue)
    status = i.get("status")
    if isinstance(status, dict):
        status = status.get("name")
    return {"key": i.get("key"), "summary": i.get("summary"), "status": status}


def extract_pr_issue_mapping(mapping: Any) -> dict[str, Any]:
    m = _obj(mapping)
    return {
        "repository": m.get("repository"),
        "jira_project": m.get("jira_project"),
        "total_mapped_prs": m.get("total_mapped_prs"),
        "total_jira_issues": m.get("total_jira_issues"),
        "mappings": [
            {
                "pr_number": _obj(item).get("pr_number"),
                "pr_title": _obj(item).get("pr_title"),
                "pr_state": _obj(item).get("pr_state"),
                "pr_url": _obj(item).get("pr_url"),
                "pr_created_at": _obj(item).get("pr_created_at"),
                "pr_updated_at": _obj(item).get("pr_updated_at"),
                "jira_keys": list(_list(_obj(item).get("jira_keys"))),
                "jira_issues": [_mapped_jira_issue(i) for i in _list(_obj(item).get("jira_issues"))],
            }
            for item in _list(m.get("mappings"))
        ],
    }


def extract_dashboard_summary(summary: Any) -> dict[str, Any]:
    s = _obj(summary)
    github = _obj(s.get("github_summary"))
    jira = _obj(s.get("jira_summary"))
    return {
        "period": s.get("period"),
        "github_summary": {
            "total_prs": github.get("total_prs"),
            "total_commits": github.get("total_commits"),
            "repositories": [
                {
                    "repo": _obj(r).get("repo"),
                    "pr_count": _obj(r).get("pr_count"),
                    "commit_count": _obj(r).get("commit_count"),
                }
                for r in _list(github.get("repositories"))
            ],
        },
        "jira_summary": {
            "total_issues": jira.get("total_issues"),
            "completed_issues": jira.get("completed_issues"),
            "completion_rate": jira.get("completion_rate"),
            "projects": [
                {
                    "project_key": _obj(p).get("project_key"),
                    "total_issues": _obj(p).get("total_issues"),
                    "completed_issues": _obj(p).get("completed_issues"),
                }
                for p in _list(jira.get("projects"))
            ],
        },
        "contributor_summary": [
            {
                "name": _obj(c).get("name"),
                "prs": _obj(c).get("prs"),
                "commits": _obj(c).get("commits"),
                "total_contributions": _obj(c).get("total_contributions"),
            }
            for c in _list(s.get("contributor_summary"))
        ],
    }


EXTRACTORS: dict[ResourceKind, Callable[[Any], dict[str, Any]]] = {
    ResourceKind.REPOSITORY: extract_repository,
    ResourceKind.REPO_CONTENT: extract_repo_content,
    ResourceKind.ISSUE: extract_issue,
    ResourceKind.COMMIT: extract_commit,
    ResourceKind.PULL_REQUEST: extract_pull_request,
    ResourceKind.USER: extract_user,
    ResourceKind.CALENDAR_EVENT: extract_calendar_event,
    ResourceKind.CHAT_MESSAGE: extract_chat_message,
    ResourceKind.CHAT_THREAD_MESSAGE: extract_chat_thread_message,
    ResourceKind.JIRA_PROJECT: extract_jira_project,
    ResourceKind.JIRA_ISSUE: extract_jira_issue,
    ResourceKind.JIRA_SEARCH_RESULT: extract_jira_search_result,
    ResourceKind.PR_ISSUE_MAPPING: extract_pr_issue_mapping,
    ResourceKind.DASHBOARD_SUMMARY: extract_dashboard_summary,
}


def extract(kind: ResourceKind, resource: Any) -> dict[str, Any]:
    """Apply the extractor registered for ``kind`` to a single resource."""
    return EXTRACTORS[kind](resource)
