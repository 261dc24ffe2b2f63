from __future__ import annotations

from core import config
from core.config import AppSettings, write_user_env_vars


def test_reads_well_known_key_names(monkeypatch):
    monkeypatch.setenv("SCREENGRASP_API_KEY", "sg-env")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("SMOOTH_EXAMPLES_DELAY_SCALE", "0.5")
    monkeypatch.setenv("SMOOTH_EXAMPLES_TWITTER_ACCOUNTS", '["one", "two"]')

    settings = AppSettings(_env_file=None)

    assert settings.screengrasp_api_key == "sg-env"
    assert settings.openai_api_key == "sk-env"
    assert settings.delay_scale == 0.5
    assert settings.twitter_accounts == ["one", "two"]


def test_defaults(monkeypatch):
    monkeypatch.delenv("SCREENGRASP_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    settings = AppSettings(_env_file=None)

    assert settings.screengrasp_api_key is None
    assert settings.openai_model == "gpt-4o"
    assert settings.erp_window_title == "ERP system"
    assert settings.twitter_accounts == ["kimmonismus", "ai_for_success", "slow_developer"]


def test_reads_env_file(tmp_path, monkeypatch):
    monkeypatch.delenv("SCREENGRASP_API_KEY", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("SCREENGRASP_API_KEY=sg-file\nSMOOTH_EXAMPLES_OPENAI_MODEL=gpt-4o-mini\n", encoding="utf-8")

    settings = AppSettings(_env_file=str(env_file))

    assert settings.screengrasp_api_key == "sg-file"
    assert settings.openai_model == "gpt-4o-mini"


def test_write_user_env_vars_merges(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "get_user_env_file", lambda: tmp_path / "cfg" / ".env")

    write_user_env_vars({"SCREENGRASP_API_KEY": "old", "OPENAI_API_KEY": "sk"})
    path = write_user_env_vars({"SCREENGRASP_API_KEY": "new", "OPENAI_API_KEY": None})

    text = path.read_text(encoding="utf-8")
    assert "SCREENGRASP_API_KEY=new" in text
    assert "OPENAI_API_KEY=sk" in text
