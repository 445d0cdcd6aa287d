"""
This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at http://mozilla.org/MPL/2.0/.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from functools import partial
from typing import TYPE_CHECKING, Any

import discord

from .checks import all_checks, ensure_from_user, ensure_is_integer, ensure_source_channel, parse_integer
from .errors import EmptyPageSetError, is_blocked_error
from .options import AppearanceOptions, JumpDisplayOptions, StopAction
from .scheduling import InactivityTimer, create_task
from .sources import EmbedPageSource, FieldPageSource, TextPageSource

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from discord.ext.commands import Context

    from .interactive import InteractiveService
    from .sources import EmbedAuthor, PagerSource

LOGGER = logging.getLogger(__name__)

__all__ = (
    "PaginatedMessage",
    "PaginatedMessageCallback",
)


class PaginatedMessage:
    """
    The pages to paginate, plus the metadata shared by every page.

    The page source is picked from the types of ``pages`` unless one is given explicitly:
    a sequence of :class:`discord.Embed` is shown as-is, a sequence of
    :class:`~reactpager.sources.PageField` (or ``(name, value)`` tuples) is batched
    ``options.fields_per_page`` to a page, and anything else is shown one entry per page
    as the embed description.
    """

    def __init__(
        self,
        pages: Sequence[Any],
        *,
        content: str | None = None,
        title: str | None = None,
        author: EmbedAuthor | None = None,
        colour: discord.Colour | int | None = None,
        alternate_description: str | None = None,
        options: AppearanceOptions | None = None,
        source: PagerSource | None = None,
    ) -> None:
        self.pages: tuple[Any, ...] = tuple(pages)
        self.content: str | None = content
        self.title: str | None = title
        self.author: EmbedAuthor | None = author
        self.colour: discord.Colour | int | None = colour
        self.alternate_description: str | None = alternate_description
        self.options: AppearanceOptions = options or AppearanceOptions()
        self.source: PagerSource | None = source

    def __repr__(self) -> str:
        return f"<PaginatedMessage pages={len(self.pages)} title={self.title!r}>"

    def make_source(self, options: AppearanceOptions | None = None) -> PagerSource:
        if self.source is not None:
            return self.source

        options = options or self.options
        if self.pages and all(isinstance(page, discord.Embed) for page in self.pages):
            return EmbedPageSource(self.pages)
        if self.pages and all(isinstance(page, tuple) for page in self.pages):
            return FieldPageSource(self.pages, per_page=options.fields_per_page)
        return TextPageSource(self.pages)


class PaginatedMessageCallback:
    """
    A single pagination session over one message, driven by reactions from the invoking user.

    Created and displayed through :meth:`InteractiveService.send_paginated_message`.
    All changes to the session state happen under ``_lock``.
    """

    def __init__(
        self,
        interactive: InteractiveService,
        ctx: Context[Any],
        pager: PaginatedMessage,
        *,
        check: Callable[[discord.RawReactionActionEvent], bool] | None = None,
        options: AppearanceOptions | None = None,
    ) -> None:
        self.interactive: InteractiveService = interactive
        self.ctx: Context[Any] = ctx
        self.pager: PaginatedMessage = pager
        self.options: AppearanceOptions = options or pager.options
        self.check: Callable[[discord.RawReactionActionEvent], bool] | None = check
        self.source: PagerSource = pager.make_source(self.options)
        self.page_count: int = self.source.get_max_pages() or 0
        self.page: int = 1
        self.message: discord.Message | None = None
        self.jumping: bool = False
        self.jump_enabled: bool = False
        self.ended: bool = False
        self.jump_task: asyncio.Task[None] | None = None
        self.timer: InactivityTimer | None = None
        self._lock: asyncio.Lock = asyncio.Lock()

    def __repr__(self) -> str:
        message_id = self.message.id if self.message else None
        return f"<PaginatedMessageCallback message={message_id} page={self.page}/{self.page_count} ended={self.ended}>"

    @property
    def current_page(self) -> int:
        return max(1, min(self.page, self.page_count))

    def footer_text(self) -> str:
        return self.options.footer_format.format(self.current_page, self.page_count)

    async def build_embed(self) -> discord.Embed:
        page = await self.source.get_page(self.current_page - 1)
        return await self.source.format_page(self, page)

    def reaction_emojis(self) -> list[str]:
        """The emoji to add to the message, in display order."""
        options = self.options
        emojis = [options.first, options.back, options.next, options.last]
        if self.jump_enabled:
            emojis.append(options.jump)
        emojis.append(options.stop)
        if options.display_information_icon:
            emojis.append(options.info)
        return [str(emoji) for emoji in emojis if emoji is not None]

    def _can_jump(self) -> bool:
        if self.options.jump is None:
            return False

        display = self.options.jump_display_options
        if display is JumpDisplayOptions.always:
            return True
        if display is JumpDisplayOptions.with_manage_messages:
            return self.interactive.user_has_permission(self.ctx.author, self.ctx.channel, "manage_messages")
        return False

    async def display(self) -> discord.Message:
        """Send the first page, register for reactions and start the inactivity timer if one is configured."""
        if self.page_count < 1:
            LOGGER.error("Pagination asked for an empty page set")
            raise EmptyPageSetError

        self.jump_enabled = self._can_jump()
        embed = await self.build_embed()
        self.message = message = await self.ctx.send(self.pager.content, embed=embed)
        LOGGER.debug("Sent first page of %s to %s as %s.", self.page_count, self.ctx.channel.id, message.id)

        self.interactive.add_reaction_callback(message, self)
        create_task(self._add_reactions(message), name=f"paginator-add-reactions-{message.id}")

        if self.options.timeout is not None:
            self.timer = InactivityTimer(self.options.timeout, self._on_timeout, name=f"paginator-timeout-{message.id}")
            self.timer.start()

        return message

    async def _add_reactions(self, message: discord.Message) -> None:
        for emoji in self.reaction_emojis():
            LOGGER.debug("Adding reaction: %r", emoji)
            try:
                await message.add_reaction(emoji)
            except discord.Forbidden as e:
                if not is_blocked_error(e, message):
                    LOGGER.debug("Missing permissions to add reaction %r to %s: %s", emoji, message.id, e)
            except discord.HTTPException as e:
                LOGGER.debug("Failed to add reaction %r to %s: %s", emoji, message.id, e)

    def stop(self) -> bool:
        """
        End the session without touching the message.

        Returns ``False`` if it had already ended, so only the first of several racing
        terminations does any cleanup.
        """
        if self.ended:
            return False

        self.ended = True
        if self.timer is not None:
            self.timer.cancel()
        if self.message is not None:
            self.interactive.remove_reaction_callback(self.message)
        return True

    async def _on_timeout(self) -> None:
        if not self.stop():
            return

        assert self.message
        LOGGER.debug("Pagination on %s timed out, clearing reactions.", self.message.id)
        with suppress(discord.HTTPException):
            await self.message.clear_reactions()

    async def handle_reaction(self, payload: discord.RawReactionActionEvent) -> bool:
        """Process one reaction. Returns whether the session has ended."""
        async with self._lock:
            if self.ended:
                return True

            action = self.options.action_for(payload.emoji)
            if action is None or (action == "jump" and not self.jump_enabled):
                LOGGER.debug("Ignoring reaction %s on %s.", payload.emoji, payload.message_id)
                return False

            if action == "stop":
                await self._stop()
                return True

            self._remove_reaction(payload)
            if action == "jump":
                self._start_jump(payload.user_id)
            elif action == "info":
                with suppress(discord.HTTPException):
                    await self.interactive.reply_and_delete(
                        self.ctx,
                        self.options.information_text,
                        timeout=self.options.info_timeout,
                    )
            elif self._move(action):
                await self._render()

            return False

    def _move(self, action: str) -> bool:
        previous = self.page
        if action == "first":
            self.page = 1
        elif action == "last":
            self.page = self.page_count
        elif action == "next":
            if self.page >= self.page_count:
                LOGGER.debug("Got next page reaction, but we're on the last page - ignoring")
                return False
            self.page += 1
        elif action == "back":
            if self.page <= 1:
                LOGGER.debug("Got previous page reaction, but we're on the first page - ignoring")
                return False
            self.page -= 1

        LOGGER.debug("Got %s reaction - changing from page %s to %s/%s", action, previous, self.page, self.page_count)
        return True

    async def _stop(self) -> None:
        if not self.stop():
            return

        assert self.message
        with suppress(discord.HTTPException):
            if self.options.stop_action is StopAction.delete_message:
                LOGGER.debug("Got stop reaction - deleting %s.", self.message.id)
                await self.message.delete()
            else:
                LOGGER.debug("Got stop reaction - clearing reactions on %s.", self.message.id)
                await self.message.clear_reactions()

    def _remove_reaction(self, payload: discord.RawReactionActionEvent) -> None:
        assert self.message
        create_task(
            self.message.remove_reaction(payload.emoji, discord.Object(id=payload.user_id)),
            suppressed_exceptions=(discord.HTTPException,),
            name=f"remove_reaction-{payload.emoji}-{payload.message_id}-{payload.user_id}",
        )

    async def _render(self) -> None:
        assert self.message
        if self.timer is not None:
            self.timer.reset()

        content = self.options.jump_prompt if self.jumping else self.pager.content
        embed = await self.build_embed()
        try:
            await self.message.edit(content=content, embed=embed)
        except discord.HTTPException as e:
            LOGGER.debug("Failed to render page %s on %s: %s", self.page, self.message.id, e)

    def _start_jump(self, user_id: int) -> None:
        assert self.message
        if self.jumping:
            LOGGER.debug("Jump already in progress on %s - ignoring", self.message.id)
            return

        LOGGER.debug("Jump was activated on %s by %s.", self.message.id, user_id)
        self.jumping = True
        self.jump_task = create_task(
            self._jump(user_id),
            suppressed_exceptions=(discord.HTTPException,),
            name=f"paginator-jump-{self.message.id}",
        )

    async def _jump(self, user_id: int) -> None:
        message = self.message
        assert message

        response: discord.Message | None = None
        error: str | None = None
        try:
            with suppress(discord.HTTPException):
                await message.edit(content=self.options.jump_prompt)

            check = all_checks(
                partial(ensure_source_channel, channel_id=self.ctx.channel.id),
                partial(ensure_from_user, user_id=user_id),
                ensure_is_integer,
            )
            response = await self.interactive.next_message(
                self.ctx,
                check=check,
                from_source_user=False,
                timeout=self.options.jump_timeout,
            )

            async with self._lock:
                target = None if response is None else parse_integer(response.content)
                if response is None:
                    LOGGER.debug("Timed out waiting for a page number on %s", message.id)
                    error = "Took too long to pick a page."
                elif target is not None and 1 <= target <= self.page_count:
                    LOGGER.debug("Jumping from page %s to %s/%s on %s", self.page, target, self.page_count, message.id)
                    self.page = target
                else:
                    LOGGER.debug("Got invalid page %r on %s", response.content, message.id)
                    error = f"Expected a number between 1 and {self.page_count}."

            if response is not None:
                with suppress(discord.HTTPException):
                    await response.delete()
        finally:
            self.jumping = False

        if error and self.options.notify_invalid_jump and not self.ended:
            with suppress(discord.HTTPException):
                await self.interactive.reply_and_delete(self.ctx, error, timeout=5)

        async with self._lock:
            if not self.ended:
                await self._render()
