"""
Reaction driven pagination for discord.py bots.

Add :class:`InteractiveService` to the bot, then hand it a :class:`PaginatedMessage`
through :meth:`InteractiveService.send_paginated_message`.
"""

from .config import Config
from .errors import EmptyPageSetError, PaginatorConfigurationError, PaginatorError, UnknownOptionError
from .interactive import InteractiveService, ReactionCallback, setup
from .options import AppearanceOptions, JumpDisplayOptions, StopAction
from .paginator import PaginatedMessage, PaginatedMessageCallback
from .sources import EmbedAuthor, EmbedPageSource, FieldPageSource, PageField, PagerSource, TextPageSource

__all__ = (
    "AppearanceOptions",
    "Config",
    "EmbedAuthor",
    "EmbedPageSource",
    "EmptyPageSetError",
    "FieldPageSource",
    "InteractiveService",
    "JumpDisplayOptions",
    "PageField",
    "PaginatedMessage",
    "PaginatedMessageCallback",
    "PagerSource",
    "PaginatorConfigurationError",
    "PaginatorError",
    "ReactionCallback",
    "StopAction",
    "TextPageSource",
    "UnknownOptionError",
    "setup",
)
