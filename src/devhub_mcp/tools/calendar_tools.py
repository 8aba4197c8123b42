"""Google Calendar tools."""

from __future__ import annotations

import logging
from typing import Any

from ..clients import Clients
from ..compaction import compact, render
from ..extractors import ResourceKind
from ..validation import ValidatedArguments

logger = logging.getLogger(__name__)

# Calendar-level metadata passed through unless the caller filters by attendees.
_LIST_METADATA = ("etag", "description", "updated", "timeZone", "accessRole", "defaultReminders")


async def tool_get_events(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    calendar_id = args.get_str("calendarId") or "primary"
    filter_by_attendees = args.get_bool("filterByAttendees") is True

    response = await clients.calendar.list_events(
        calendar_id=calendar_id,
        time_min=args.get_str("timeMin"),
        time_max=args.get_str("timeMax"),
        max_results=args.get_int("maxResults") or 10,
        q=args.get_str("q"),
        single_events=args.get_bool("singleEvents") is not False,
        order_by=args.get_str("orderBy") or "startTime",
    )
    if not isinstance(response, dict):
        response = {}

    items = [e for e in response.get("items") or [] if isinstance(e, dict)]
    if filter_by_attendees:
        items = [e for e in items if e.get("attendees")]
    logger.log(args.log_level, "google_calendar_get_events: %s -> %d events", calendar_id, len(items))

    data: dict[str, Any] = {
        "kind": "calendar#events",
        "summary": response.get("summary"),
        "items": compact(items, ResourceKind.CALENDAR_EVENT, args.options),
    }
    if not filter_by_attendees:
        data.update((key, response[key]) for key in _LIST_METADATA if key in response)
        if response.get("nextPageToken"):
            data["nextPageToken"] = response["nextPageToken"]
    return render(data, args.options)


async def tool_create_event(clients: Clients, args: ValidatedArguments) -> Any:
    event: dict[str, Any] = {
        "summary": args.require_str("summary"),
        "start": args.get_dict("start"),
        "end": args.get_dict("end"),
    }
    for key in ("description", "location"):
        value = args.get_str(key)
        if value:
            event[key] = value
    attendees = args.get_list("attendees")
    if attendees:
        event["attendees"] = attendees
    reminders = args.get_dict("reminders")
    if reminders:
        event["reminders"] = reminders

    calendar_id = args.get_str("calendarId") or "primary"
    created = await clients.calendar.create_event(event=event, calendar_id=calendar_id)
    logger.log(args.log_level, "google_calendar_create_event: created in %s", calendar_id)
    return created
