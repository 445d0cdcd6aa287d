import discord
import pytest

from reactpager import (
    AppearanceOptions,
    Config,
    JumpDisplayOptions,
    PaginatorConfigurationError,
    StopAction,
    UnknownOptionError,
)

from .conftest import GUILD_ID


class TestAppearanceOptions:
    def test_defaults(self):
        options = AppearanceOptions()

        assert options.footer_format == "Page {0}/{1}"
        assert options.fields_per_page == 6
        assert options.jump_display_options is JumpDisplayOptions.with_manage_messages
        assert options.timeout is None
        assert options.jump_timeout == 15

    def test_action_for(self):
        options = AppearanceOptions(stop=discord.PartialEmoji(name="\U0001f6d1"), info=None)

        assert options.action_for("▶") == "next"
        assert options.action_for(discord.PartialEmoji(name="⏮")) == "first"
        assert options.action_for("\U0001f6d1") == "stop"
        assert options.action_for("ℹ") is None
        assert options.action_for("\U0001f600") is None

    @pytest.mark.parametrize("fields_per_page", [0, -3])
    def test_rejects_empty_pages(self, fields_per_page):
        with pytest.raises(PaginatorConfigurationError):
            AppearanceOptions(fields_per_page=fields_per_page)

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(PaginatorConfigurationError):
            AppearanceOptions(timeout=0)

    def test_from_mapping_by_name(self):
        options = AppearanceOptions.from_mapping(
            {"jump_display_options": "always", "stop_action": "delete_message", "jump": None},
        )

        assert options.jump_display_options is JumpDisplayOptions.always
        assert options.stop_action is StopAction.delete_message
        assert options.jump is None

    def test_from_mapping_keeps_base(self):
        base = AppearanceOptions(timeout=30, fields_per_page=3)

        options = AppearanceOptions.from_mapping({"fields_per_page": 8}, base=base)

        assert options.timeout == 30
        assert options.fields_per_page == 8

    def test_from_mapping_unknown_key(self):
        with pytest.raises(UnknownOptionError) as exc:
            AppearanceOptions.from_mapping({"colour": "red"})

        assert exc.value.key == "colour"

    def test_from_mapping_bad_enum(self):
        with pytest.raises(PaginatorConfigurationError, match="not a valid StopAction"):
            AppearanceOptions.from_mapping({"stop_action": "explode"})

    def test_mapping_round_trip(self):
        options = AppearanceOptions(timeout=45, stop_action=StopAction.delete_message, first=None)

        assert AppearanceOptions.from_mapping(options.to_mapping()) == options


@pytest.mark.anyio
class TestConfig:
    async def test_set_appearance_persists(self, tmp_path):
        path = tmp_path / "pager.json"
        config = Config(path)

        options = await config.set_appearance(GUILD_ID, stop_action=StopAction.delete_message, timeout=90)

        assert options.stop_action is StopAction.delete_message
        reloaded = Config(path)
        assert reloaded[GUILD_ID] == {"stop_action": "delete_message", "timeout": 90}
        assert GUILD_ID in reloaded
        assert len(reloaded) == 1

    async def test_set_appearance_merges(self, tmp_path):
        config = Config(tmp_path / "pager.json")
        await config.set_appearance(GUILD_ID, timeout=90)

        options = await config.set_appearance(GUILD_ID, fields_per_page=2)

        assert options.timeout == 90
        assert options.fields_per_page == 2

    async def test_invalid_override_is_not_saved(self, tmp_path):
        config = Config(tmp_path / "pager.json")

        with pytest.raises(UnknownOptionError):
            await config.set_appearance(GUILD_ID, nonsense=True)

        assert GUILD_ID not in config

    async def test_appearance_for(self, tmp_path):
        config = Config(tmp_path / "pager.json")
        await config.put(GUILD_ID, {"footer_format": "{0}/{1}"})
        base = AppearanceOptions(timeout=10)

        assert config.appearance_for(GUILD_ID, base).footer_format == "{0}/{1}"
        assert config.appearance_for(GUILD_ID, base).timeout == 10
        assert config.appearance_for(GUILD_ID + 1, base) is base
        assert config.appearance_for(None, base) is base

    async def test_remove(self, tmp_path):
        config = Config(tmp_path / "pager.json")
        await config.put(GUILD_ID, {"timeout": 5})

        await config.remove(GUILD_ID)
        await config.remove(GUILD_ID)

        assert config.get(GUILD_ID) is None
        assert Config(tmp_path / "pager.json").all() == {}

    async def test_load_later(self, tmp_path):
        path = tmp_path / "pager.json"
        await Config(path).put(GUILD_ID, {"timeout": 5})

        config = Config(path, load_later=True)
        await config.load()

        assert config.get(GUILD_ID) == {"timeout": 5}
