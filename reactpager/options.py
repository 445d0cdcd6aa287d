from __future__ import annotations

import dataclasses
import enum
from typing import TYPE_CHECKING, Any, TypeVar

import discord

from .errors import PaginatorConfigurationError, UnknownOptionError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Self

__all__ = (
    "AppearanceOptions",
    "Emoji",
    "JumpDisplayOptions",
    "StopAction",
)

Emoji = str | discord.PartialEmoji | discord.Emoji


class JumpDisplayOptions(enum.Enum):
    never = 0
    with_manage_messages = 1
    always = 2


class StopAction(enum.Enum):
    clear_reactions = 0
    delete_message = 1


_EMOJI_FIELDS = ("first", "back", "next", "last", "jump", "stop", "info")


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class AppearanceOptions:
    """
    How a paginated message looks and which reactions drive it.

    Setting any of the emoji to ``None`` disables that action; it is neither added to the
    message nor handled.
    """

    first: Emoji | None = "⏮"
    back: Emoji | None = "◀"
    next: Emoji | None = "▶"
    last: Emoji | None = "⏭"
    stop: Emoji | None = "⏹"
    jump: Emoji | None = "\U0001f522"
    info: Emoji | None = "ℹ"

    footer_format: str = "Page {0}/{1}"
    information_text: str = "This is a paginator. React with the respective icons to change page."
    jump_prompt: str = "**Enter a page number**"
    jump_display_options: JumpDisplayOptions = JumpDisplayOptions.with_manage_messages
    stop_action: StopAction = StopAction.clear_reactions
    display_information_icon: bool = True
    notify_invalid_jump: bool = True
    fields_per_page: int = 6

    # seconds
    timeout: float | None = None
    info_timeout: float = 30.0
    jump_timeout: float = 15.0

    def __post_init__(self) -> None:
        if self.fields_per_page < 1:
            raise PaginatorConfigurationError(f"fields_per_page must be at least 1. ({self.fields_per_page} < 1)")
        if self.timeout is not None and self.timeout <= 0:
            raise PaginatorConfigurationError(f"timeout must be positive. ({self.timeout} <= 0)")

    def emoji_for(self, action: str) -> str | None:
        value = getattr(self, action)
        return None if value is None else str(value)

    def action_for(self, emoji: Emoji) -> str | None:
        """Resolve a reacted emoji back to the action name it is configured for."""
        as_string = str(emoji)
        for action in _EMOJI_FIELDS:
            if self.emoji_for(action) == as_string:
                return action
        return None

    def replace(self, **changes: Any) -> Self:
        return dataclasses.replace(self, **changes)

    def to_mapping(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if isinstance(value, enum.Enum):
                value = value.name
            elif field.name in _EMOJI_FIELDS and value is not None:
                value = str(value)
            data[field.name] = value
        return data

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, base: AppearanceOptions | None = None) -> Self:
        """
        Build options from a plain mapping, e.g. one loaded from :class:`~reactpager.config.Config`.

        Keys missing from ``data`` fall back to ``base``, or the defaults if no base is given.
        Enum members may be given by name.
        """
        names = {field.name for field in dataclasses.fields(cls)}
        changes: dict[str, Any] = {}
        for key, value in data.items():
            if key not in names:
                raise UnknownOptionError(key)

            if key == "jump_display_options" and isinstance(value, str):
                value = _enum_by_name(JumpDisplayOptions, value)
            elif key == "stop_action" and isinstance(value, str):
                value = _enum_by_name(StopAction, value)
            changes[key] = value

        if base is None:
            return cls(**changes)
        return dataclasses.replace(base, **changes)  # pyright: ignore[reportReturnType] # base is always this class


E = TypeVar("E", bound=enum.Enum)


def _enum_by_name(enum_type: type[E], name: str) -> E:
    try:
        return enum_type[name]
    except KeyError:
        msg = f"{name!r} is not a valid {enum_type.__name__}"
        raise PaginatorConfigurationError(msg) from None
