import logging
from typing import Generic, TypeVar

from discord.ext import commands

__all__: tuple[str, ...] = ("BaseCog",)

BotT = TypeVar("BotT", bound="commands.Bot")


class BaseCog(commands.Cog, Generic[BotT]):
    def __init__(self, bot: BotT, /) -> None:
        self.bot: BotT = bot

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"

    @property
    def logger(self) -> logging.Logger:
        return logging.getLogger(f"{__name__}.{self.__class__.__name__}")
