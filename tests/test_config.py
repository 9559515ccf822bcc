import pytest

from ddbot.config.core import Core
from ddbot.config.loader import load_config
from ddbot.config.reminders import Reminders
from ddbot.config.trivia import Trivia


def test_missing_token_raises(monkeypatch):
    monkeypatch.delenv("DISCORD_TOKEN", raising=False)
    with pytest.raises(ValueError, match="DISCORD_TOKEN"):
        Core({})


def test_token_env_name_is_configurable(monkeypatch):
    monkeypatch.setenv("MY_BOT_TOKEN", "abc")
    core = Core({"discord": {"token_env": "MY_BOT_TOKEN"}})
    assert core.DISCORD_API_TOKEN == "abc"


def test_toml_values_override_defaults(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        "[ddbot.discord]\n"
        'default_prefix = "?"\n'
        "[ddbot.reminders]\n"
        "poll_interval = 5\n"
        "max_pending = 3\n"
        "[ddbot.trivia]\n"
        'api_base = "http://localhost:9000/"\n',
        encoding="utf-8",
    )
    raw = load_config(path)

    assert Core(raw).DEFAULT_PREFIX == "?"
    rem = Reminders(raw)
    assert rem.POLL_INTERVAL == 5.0
    assert rem.MAX_PENDING == 3
    assert Trivia(raw).API_BASE == "http://localhost:9000"


def test_missing_config_file_is_empty(tmp_path):
    assert load_config(tmp_path / "nope.toml") == {}


def test_blank_prefix_falls_back(monkeypatch):
    monkeypatch.setenv("DEFAULT_PREFIX", "  ")
    assert Core({}).DEFAULT_PREFIX == "!"


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "bot.toml"
    path.write_text('[ddbot.storage]\nsql_db_path = "elsewhere.db"\n', encoding="utf-8")
    monkeypatch.setenv("DDBOT_CONFIG", str(path))

    assert Core(load_config()).SQL_DB_PATH == "elsewhere.db"


def test_non_table_sections_are_rejected(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[ddbot]\nreminders = "often"\n', encoding="utf-8")

    with pytest.raises(ValueError, match=r"\[ddbot.reminders\] must be a table"):
        Reminders(load_config(path))

    path.write_text('ddbot = 3\n', encoding="utf-8")
    with pytest.raises(ValueError, match="must be a table"):
        load_config(path)
