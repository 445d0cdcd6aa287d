"""
This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at http://mozilla.org/MPL/2.0/.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any, Protocol

import discord
from discord.ext import commands

from .checks import all_checks, ensure_from_user, ensure_reaction_from_source_user, ensure_source_channel
from .cog import BaseCog
from .paginator import PaginatedMessageCallback

if TYPE_CHECKING:
    from collections.abc import Callable

    from discord.ext.commands import Context

    from .config import Config
    from .paginator import PaginatedMessage

__all__ = (
    "InteractiveService",
    "ReactionCallback",
    "setup",
)


class ReactionCallback(Protocol):
    check: Callable[[discord.RawReactionActionEvent], bool] | None

    async def handle_reaction(self, payload: discord.RawReactionActionEvent) -> bool: ...

    def stop(self) -> bool: ...


class InteractiveService(BaseCog[commands.Bot]):
    """
    Routes reactions to the callbacks registered against their message, and waits on follow-up messages.

    .. code-block:: python3

        service = InteractiveService(bot)
        await bot.add_cog(service)

        pager = PaginatedMessage(["first page", "second page"], title="Things")
        await service.send_paginated_message(ctx, pager)
    """

    def __init__(self, bot: commands.Bot, /, *, config: Config | None = None) -> None:
        super().__init__(bot)
        self.config: Config | None = config
        self._callbacks: dict[int, ReactionCallback] = {}

    @property
    def callbacks(self) -> dict[int, ReactionCallback]:
        return self._callbacks.copy()

    async def cog_unload(self) -> None:
        for callback in list(self._callbacks.values()):
            callback.stop()
        self.clear_reaction_callbacks()

    def add_reaction_callback(self, message: discord.abc.Snowflake, callback: ReactionCallback) -> None:
        self.logger.debug("Registering reaction callback for message %s.", message.id)
        self._callbacks[message.id] = callback

    def remove_reaction_callback(self, message: discord.abc.Snowflake) -> ReactionCallback | None:
        callback = self._callbacks.pop(message.id, None)
        if callback is not None:
            self.logger.debug("Removed reaction callback for message %s.", message.id)
        return callback

    def clear_reaction_callbacks(self) -> None:
        self._callbacks.clear()

    @commands.Cog.listener()
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent) -> None:
        if self.bot.user is not None and payload.user_id == self.bot.user.id:
            return

        callback = self._callbacks.get(payload.message_id)
        if callback is None:
            return

        if callback.check is not None and not callback.check(payload):
            return

        try:
            ended = await callback.handle_reaction(payload)
        except Exception:
            self.logger.exception("Unhandled error in reaction callback for message %s.", payload.message_id)
            return

        # the callback may have been swapped out while we were waiting on it
        if ended and self._callbacks.get(payload.message_id) is callback:
            del self._callbacks[payload.message_id]

    async def next_message(
        self,
        ctx: Context[Any],
        *,
        check: Callable[[discord.Message], bool] | None = None,
        from_source_user: bool = True,
        in_source_channel: bool = True,
        timeout: float = 15.0,
    ) -> discord.Message | None:
        """Wait for the next message matching ``check``, or return ``None`` once ``timeout`` seconds pass."""
        checks: list[Callable[[discord.Message], bool]] = []
        if from_source_user:
            checks.append(partial(ensure_from_user, user_id=ctx.author.id))
        if in_source_channel:
            checks.append(partial(ensure_source_channel, channel_id=ctx.channel.id))
        if check is not None:
            checks.append(check)

        try:
            return await self.bot.wait_for("message", check=all_checks(*checks), timeout=timeout)
        except TimeoutError:
            self.logger.debug("Timed out waiting for a message in %s.", ctx.channel.id)
            return None

    async def reply_and_delete(
        self,
        ctx: Context[Any],
        content: str | None = None,
        *,
        embed: discord.Embed | None = None,
        timeout: float = 5.0,
    ) -> discord.Message:
        return await ctx.send(content, embed=embed, delete_after=timeout)

    def user_has_permission(self, user: discord.abc.User, channel: Any, permission: str) -> bool:
        """Whether ``user`` has ``permission`` in ``channel``. Always false outside of a guild."""
        if permission not in discord.Permissions.VALID_FLAGS:
            raise ValueError(f"{permission!r} is not a valid permission name")

        if getattr(channel, "guild", None) is None or not isinstance(user, discord.Member):
            return False

        return getattr(channel.permissions_for(user), permission)

    async def send_paginated_message(
        self,
        ctx: Context[Any],
        pager: PaginatedMessage,
        *,
        from_source_user: bool = True,
    ) -> PaginatedMessageCallback:
        """
        Send ``pager`` to the context's channel and start handling its reactions.

        If a :class:`~reactpager.config.Config` is attached, the guild's stored appearance
        overrides are applied on top of ``pager.options``. With ``from_source_user``, only
        reactions from the command invoker are handled.
        """
        options = pager.options
        if self.config is not None:
            options = self.config.appearance_for(ctx.guild.id if ctx.guild else None, options)

        check = partial(ensure_reaction_from_source_user, user_id=ctx.author.id) if from_source_user else None
        callback = PaginatedMessageCallback(self, ctx, pager, check=check, options=options)
        await callback.display()
        return callback


async def setup(bot: commands.Bot) -> None:
    await bot.add_cog(InteractiveService(bot))
