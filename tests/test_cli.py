from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from cli import main as cli_main
from core.domain.models import Order, OrderedArticle
from core.services.news_checker import NewsCheckResult
from core.services.order_entry import OrderEntryResult

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "config"))
    monkeypatch.delenv("SCREENGRASP_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


def test_missing_key_exits_with_error():
    result = runner.invoke(cli_main.app, ["--no-banner", "calculator"])

    assert result.exit_code == 1
    assert "SCREENGRASP_API_KEY" in result.output


def test_orders_exports_extracted_order(tmp_path, monkeypatch):
    monkeypatch.setenv("SCREENGRASP_API_KEY", "sg-test")
    order = Order(
        customer_name="ACME",
        ordered_articles=[OrderedArticle(article_name="Router", quantity=2, price_per_unit=99.5)],
    )
    seen: dict = {}

    async def fake_run_order_entry(*, settings, source):
        seen["source"] = source
        return OrderEntryResult(screenshot_taken=True, order=order, entered=True)

    monkeypatch.setattr(cli_main, "run_order_entry", fake_run_order_entry)
    output = tmp_path / "out" / "order.json"

    result = runner.invoke(cli_main.app, ["--no-banner", "orders", "--source", "outlook", "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert seen["source"].value == "outlook"
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["customerName"] == "ACME"
    assert data["orderedArticles"][0]["pricePerUnit"] == 99.5
    assert "entered" in result.output


def test_news_prints_raw_answer_when_not_json(monkeypatch):
    monkeypatch.setenv("SCREENGRASP_API_KEY", "sg-test")
    accounts_seen: list = []

    async def fake_run_news_checker(*, settings, accounts):
        accounts_seen.append(accounts)
        return NewsCheckResult(tweets_text="t", raw_response="Nothing big happened.")

    monkeypatch.setattr(cli_main, "run_news_checker", fake_run_news_checker)

    result = runner.invoke(cli_main.app, ["--no-banner", "news", "-a", "one", "-a", "two"])

    assert result.exit_code == 0, result.output
    assert accounts_seen == [["one", "two"]]
    assert "Nothing big happened." in result.output


def test_doctor_setup_keys_writes_user_env(tmp_path, monkeypatch):
    result = runner.invoke(cli_main.app, ["--no-banner", "doctor", "setup-keys"], input="sg-123\nsk-456\n")

    assert result.exit_code == 0, result.output
    env_file = tmp_path / "config" / "smooth-operator-examples" / ".env"
    text = env_file.read_text(encoding="utf-8")
    assert "SCREENGRASP_API_KEY=sg-123" in text
    assert "OPENAI_API_KEY=sk-456" in text
