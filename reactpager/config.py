"""
This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at http://mozilla.org/MPL/2.0/.

This file was sourced from [RoboDanny](https://github.com/Rapptz/RoboDanny).
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar, overload

from .formats import from_json, to_json
from .options import AppearanceOptions

if TYPE_CHECKING:
    import pathlib

LOGGER = logging.getLogger(__name__)

__all__ = ("Config",)

D = TypeVar("D")

AppearanceOverrides = dict[str, Any]


class Config:
    """
    The "database" object holding per-guild appearance overrides. Internally based on ``json``.

    Each key is a guild ID, each value a partial :meth:`AppearanceOptions.to_mapping` dict.
    Must be created from within a running event loop.
    """

    def __init__(
        self,
        path: pathlib.Path,
        /,
        *,
        load_later: bool = False,
    ) -> None:
        self.path = path
        self.loop = asyncio.get_event_loop()
        self.lock = asyncio.Lock()
        self._db: dict[str, AppearanceOverrides] = {}

        if load_later:
            self.loop.create_task(self.load())
        else:
            self.load_from_file()

    def load_from_file(self) -> None:
        try:
            with self.path.open(encoding="utf-8") as f:
                self._db = from_json(f.read())
        except FileNotFoundError:
            LOGGER.debug("No config found at %s, starting empty.", self.path)
            self._db = {}

    async def load(self) -> None:
        async with self.lock:
            await self.loop.run_in_executor(None, self.load_from_file)

    def _dump(self) -> None:
        temp = self.path.with_suffix(".tmp")
        with temp.open("w", encoding="utf-8") as tmp:
            tmp.write(to_json(self._db.copy()))

        # atomically move the file
        temp.replace(self.path)

    async def save(self) -> None:
        async with self.lock:
            await self.loop.run_in_executor(None, self._dump)

    @overload
    def get(self, key: Any) -> AppearanceOverrides | None: ...

    @overload
    def get(self, key: Any, default: D) -> AppearanceOverrides | D: ...

    def get(self, key: Any, default: Any = None) -> Any:
        """Retrieves a config entry."""
        return self._db.get(str(key), default)

    async def put(self, key: Any, value: AppearanceOverrides) -> None:
        """Edits a config entry."""
        self._db[str(key)] = value
        await self.save()

    async def remove(self, key: Any) -> None:
        """Removes a config entry."""
        try:
            del self._db[str(key)]
        except KeyError:
            return
        await self.save()

    def __contains__(self, item: Any) -> bool:
        return str(item) in self._db

    def __getitem__(self, item: Any) -> AppearanceOverrides:
        return self._db[str(item)]

    def __len__(self) -> int:
        return len(self._db)

    def all(self) -> dict[str, AppearanceOverrides]:
        return self._db

    def appearance_for(self, guild_id: int | None, base: AppearanceOptions) -> AppearanceOptions:
        """Apply the stored overrides for ``guild_id`` on top of ``base``."""
        if guild_id is None:
            return base

        overrides = self.get(guild_id)
        if not overrides:
            return base

        LOGGER.debug("Applying appearance overrides for guild %s: %r", guild_id, overrides)
        return AppearanceOptions.from_mapping(overrides, base=base)

    async def set_appearance(self, guild_id: int, **overrides: Any) -> AppearanceOptions:
        """
        Merge ``overrides`` into the stored entry for ``guild_id`` and persist it.

        The overrides are validated before anything is written.
        """
        merged = {**self.get(guild_id, {}), **overrides}
        options = AppearanceOptions.from_mapping(merged)
        serialised = options.to_mapping()
        await self.put(guild_id, {key: serialised[key] for key in merged})
        return options
