"""
This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at http://mozilla.org/MPL/2.0/.

Page sources used by :class:`~reactpager.paginator.PaginatedMessageCallback`.

Each page set shape has its own source, and the source alone decides how a page is turned into
an embed. None of them mutate their entries while formatting, so a page only depends on the
entries and the page number.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

import discord
from discord.ext import menus
from discord.ext.commands import Paginator as CommandPaginator

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .paginator import PaginatedMessageCallback

__all__ = (
    "EmbedAuthor",
    "EmbedPageSource",
    "FieldPageSource",
    "PageField",
    "PagerSource",
    "TextPageSource",
)


class EmbedAuthor(NamedTuple):
    name: str
    url: str | None = None
    icon_url: str | None = None

    @classmethod
    def from_user(cls, user: discord.abc.User) -> EmbedAuthor:
        return cls(name=user.display_name, icon_url=user.display_avatar.url)


class PageField(NamedTuple):
    name: Any
    value: Any
    inline: bool = False


class PagerSource(menus.ListPageSource):
    """Base for the page sources, adding the shared embed metadata handling."""

    def _base_embed(self, menu: PaginatedMessageCallback) -> discord.Embed:
        pager = menu.pager
        embed = discord.Embed(title=pager.title, colour=pager.colour)
        if pager.author is not None:
            embed.set_author(name=pager.author.name, url=pager.author.url, icon_url=pager.author.icon_url)
        embed.set_footer(text=menu.footer_text())
        return embed

    async def format_page(self, menu: PaginatedMessageCallback, page: Any) -> discord.Embed:
        raise NotImplementedError


class EmbedPageSource(PagerSource):
    """Pages which are whole, pre-built embeds. Only the footer is stamped in."""

    def __init__(self, embeds: Sequence[discord.Embed]) -> None:
        super().__init__(list(embeds), per_page=1)

    async def format_page(self, menu: PaginatedMessageCallback, page: discord.Embed) -> discord.Embed:
        return page.copy().set_footer(text=menu.footer_text())


class TextPageSource(PagerSource):
    """One page per entry, each rendered with ``str()`` into the embed description."""

    def __init__(self, pages: Sequence[Any]) -> None:
        super().__init__(list(pages), per_page=1)

    @classmethod
    def from_text(cls, text: str, *, prefix: str | None = None, suffix: str | None = None, max_size: int = 4000) -> TextPageSource:
        """Split ``text`` by line into as many pages as needed to keep each under ``max_size`` characters."""
        pages = CommandPaginator(prefix=prefix, suffix=suffix, max_size=max_size)
        for line in text.split("\n"):
            pages.add_line(line)

        return cls(pages.pages)

    async def format_page(self, menu: PaginatedMessageCallback, page: Any) -> discord.Embed:
        embed = self._base_embed(menu)
        embed.description = str(page)
        return embed


class FieldPageSource(PagerSource):
    """A page source that batches ``(name, value)`` field entries ``per_page`` to a page."""

    def __init__(self, fields: Sequence[PageField | tuple[Any, Any]], *, per_page: int = 6) -> None:
        entries = [field if isinstance(field, PageField) else PageField(*field) for field in fields]
        super().__init__(entries, per_page=per_page)

    async def get_page(self, page_number: int) -> list[PageField]:
        # ListPageSource hands back a bare entry when per_page is 1
        base = page_number * self.per_page
        return self.entries[base : base + self.per_page]

    async def format_page(self, menu: PaginatedMessageCallback, page: list[PageField]) -> discord.Embed:
        embed = self._base_embed(menu)
        embed.description = menu.pager.alternate_description
        for name, value, inline in page:
            embed.add_field(name=name, value=value, inline=inline)
        return embed
