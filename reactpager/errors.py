from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from discord import Forbidden, Message


LOGGER = logging.getLogger(__name__)

__all__ = (
    "EmptyPageSetError",
    "PaginatorConfigurationError",
    "PaginatorError",
    "UnknownOptionError",
    "is_blocked_error",
)


class PaginatorError(Exception):
    """Base exception for everything raised by this package."""


class PaginatorConfigurationError(PaginatorError, ValueError):
    """Raised when a pagination session cannot be started with the given pages or options."""


class EmptyPageSetError(PaginatorConfigurationError):
    """Raised when attempting to paginate with empty contents."""

    def __init__(self) -> None:
        super().__init__("No pages to paginate")


class UnknownOptionError(PaginatorConfigurationError):
    """
    Raised when loading appearance options containing a key that isn't recognised.

    Attributes:
        `key` -- the offending key
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unknown appearance option {key!r}")


def is_blocked_error(error: Forbidden, message: Message | None = None) -> bool:
    """
    Checks for ``discord.Forbidden`` 90001 errors, raised when reacting to a message whose author blocked the bot.

    Args:
        error: The raised ``discord.Forbidden`` to check.
        message: The message the reaction was for, included in logs if provided.
    """
    if error.code != 90001:
        return False

    if message is None:
        LOGGER.info("Failed to add reaction(s) to a message since the message author has blocked the bot")
    else:
        LOGGER.info(
            "Failed to add reaction(s) to message %d-%d since the message author has blocked the bot",
            message.channel.id,
            message.id,
        )
    return True
