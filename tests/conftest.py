import asyncio
from collections.abc import Callable
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from reactpager import scheduling
from reactpager.interactive import InteractiveService

BOT_ID = 1
AUTHOR_ID = 100
OTHER_USER_ID = 101
CHANNEL_ID = 200
GUILD_ID = 300
PAGER_MESSAGE_ID = 400


@pytest.fixture
def anyio_backend():
    return "asyncio"


def _make_message(message_id: int, *, content: str = "", channel_id: int = CHANNEL_ID, author_id: int = AUTHOR_ID):
    message = MagicMock()
    message.id = message_id
    message.content = content
    message.channel.id = channel_id
    message.author.id = author_id
    for name in ("edit", "delete", "add_reaction", "remove_reaction", "clear_reactions"):
        setattr(message, name, AsyncMock())
    return message


@pytest.fixture
def create_message() -> Callable:
    return _make_message


@pytest.fixture
def create_payload() -> Callable:
    def _create_payload(emoji: str, *, user_id: int = AUTHOR_ID, message_id: int = PAGER_MESSAGE_ID):
        return SimpleNamespace(
            emoji=discord.PartialEmoji(name=emoji),
            user_id=user_id,
            message_id=message_id,
            channel_id=CHANNEL_ID,
        )

    return _create_payload


@pytest.fixture
def create_http_exception() -> Callable:
    def _create_http_exception(cls: type[discord.HTTPException] = discord.HTTPException, *, status: int = 500, code: int = 0):
        error = cls(MagicMock(status=status, reason="Mocked"), "mocked failure")
        error.code = code
        return error

    return _create_http_exception


@pytest.fixture
def sent_message():
    return _make_message(PAGER_MESSAGE_ID, author_id=BOT_ID)


@pytest.fixture
def author():
    member = MagicMock(spec=discord.Member)
    member.id = AUTHOR_ID
    return member


@pytest.fixture
def ctx(sent_message, author):
    context = MagicMock()
    context.author = author
    context.guild.id = GUILD_ID
    context.channel.id = CHANNEL_ID
    context.channel.guild = context.guild
    context.channel.permissions_for.return_value = discord.Permissions(manage_messages=True)
    context.send = AsyncMock(return_value=sent_message)
    return context


@pytest.fixture
def bot():
    mocked = MagicMock()
    mocked.user.id = BOT_ID
    mocked.wait_for = AsyncMock()
    mocked.add_cog = AsyncMock()
    return mocked


@pytest.fixture
def service(bot):
    return InteractiveService(bot)


@pytest.fixture
def drain() -> Callable:
    """Wait until every background task spawned through ``create_task`` has finished."""

    async def _drain() -> None:
        loop = asyncio.get_running_loop()
        while pending := [task for task in scheduling._background_tasks if not task.done() and task.get_loop() is loop]:
            await asyncio.gather(*pending, return_exceptions=True)

    return _drain
