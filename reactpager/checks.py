"""
Predicates used to filter incoming messages and reactions.

They are meant to be bound with :func:`functools.partial` and handed to
:meth:`discord.Client.wait_for` or a reaction callback::

    check = all_checks(
        partial(ensure_source_channel, channel_id=ctx.channel.id),
        partial(ensure_from_user, user_id=ctx.author.id),
        ensure_is_integer,
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

    import discord

LOGGER = logging.getLogger(__name__)

__all__ = (
    "all_checks",
    "ensure_from_user",
    "ensure_is_integer",
    "ensure_reaction_from_source_user",
    "ensure_source_channel",
    "parse_integer",
)


def parse_integer(content: str) -> int | None:
    try:
        return int(content.strip())
    except ValueError:
        return None


def ensure_source_channel(message: discord.Message, *, channel_id: int) -> bool:
    return message.channel.id == channel_id


def ensure_from_user(message: discord.Message, *, user_id: int) -> bool:
    return message.author.id == user_id


def ensure_is_integer(message: discord.Message) -> bool:
    return parse_integer(message.content) is not None


def ensure_reaction_from_source_user(payload: discord.RawReactionActionEvent, *, user_id: int) -> bool:
    if payload.user_id == user_id:
        return True

    LOGGER.debug("Ignoring reaction %s by %s on %s: not the source user.", payload.emoji, payload.user_id, payload.message_id)
    return False


T = TypeVar("T")


def all_checks(*checks: Callable[[T], bool]) -> Callable[[T], bool]:
    """Combine ``checks`` into one which passes only if every one of them does. No checks always passes."""

    def predicate(item: T) -> bool:
        return all(check(item) for check in checks)

    return predicate
