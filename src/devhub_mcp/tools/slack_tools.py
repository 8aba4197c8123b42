"""Slack channel, message and thread tools."""

from __future__ import annotations

import logging
from typing import Any

from ..clients import Clients
from ..compaction import compact, render
from ..extractors import ResourceKind
from ..validation import ValidatedArguments

logger = logging.getLogger(__name__)


def _with_compacted_messages(data: dict[str, Any], kind: ResourceKind, args: ValidatedArguments) -> dict[str, Any]:
    messages = data.get("messages")
    if not args.options.compact or not isinstance(messages, list):
        return data
    return {**data, "messages": compact(messages, kind, args.options)}


async def tool_list_channels(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    data = await clients.slack.list_channels(limit=args.get_int("limit") or 100, cursor=args.get_str("cursor"))
    channels = data.get("channels")
    if args.get_bool("member_only") and isinstance(channels, list):
        channels = [c for c in channels if isinstance(c, dict) and c.get("is_member") is True]
        data = {**data, "channels": channels}
    logger.log(args.log_level, "slack_list_channels: %d channels", len(channels) if isinstance(channels, list) else 0)
    return data


async def tool_post_message(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    channel_id = args.require_str("channel_id")
    data = await clients.slack.post_message(channel_id=channel_id, text=args.require_str("text"))
    logger.log(args.log_level, "slack_post_message: posted to %s", channel_id)
    return data


async def tool_user_conversations(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    return await clients.slack.user_conversations(
        user_id=args.require_str("user_id"),
        limit=args.get_int("limit") or 100,
        cursor=args.get_str("cursor"),
    )


async def tool_get_channel_history(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    channel_name = args.require_str("channel_name")
    channel_id = await clients.slack.resolve_channel_id(channel_name)
    data = await clients.slack.channel_history(
        channel_id=channel_id,
        limit=args.get_int("limit") or 10,
        cursor=args.get_str("cursor"),
    )
    logger.log(args.log_level, "slack_get_channel_history: %s (%s)", channel_name, channel_id)
    return render(_with_compacted_messages(data, ResourceKind.CHAT_MESSAGE, args), args.options)


async def tool_get_thread_replies(clients: Clients, args: ValidatedArguments) -> dict[str, Any]:
    channel_name = args.require_str("channel_name")
    thread_ts = args.require_str("thread_ts")
    channel_id = await clients.slack.resolve_channel_id(channel_name)
    data = await clients.slack.thread_replies(channel_id=channel_id, thread_ts=thread_ts, limit=args.get_int("limit") or 10)
    logger.log(args.log_level, "slack_get_thread_replies: %s thread %s", channel_name, thread_ts)
    return render(_with_compacted_messages(data, ResourceKind.CHAT_THREAD_MESSAGE, args), args.options)
