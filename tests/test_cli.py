"""
Tests for the command surface: dispatch, confirmations, usage errors.
"""

import json

import pytest

from stockmon import cli
from stockmon.config import Config

from conftest import make_quote


@pytest.fixture
def run(tmp_path, monkeypatch):
    data_dir = tmp_path / "home"
    monkeypatch.delenv("STOCKMON_HOME", raising=False)
    monkeypatch.delenv("QUOTE_SOURCE", raising=False)

    def _run(*argv):
        return cli.main(["--data-dir", str(data_dir), *argv])

    _run.data_dir = data_dir
    return _run


def read_portfolio(run):
    return json.loads((run.data_dir / "portfolio.json").read_text(encoding="utf-8"))


def test_config_saves_key(run, capsys):
    assert run("config", "--key", "abc123") == 0
    assert "API token saved successfully" in capsys.readouterr().out
    saved = json.loads((run.data_dir / "config.json").read_text(encoding="utf-8"))
    assert saved == {"apiKey": "abc123"}


def test_add_then_merge(run, capsys):
    assert run("add", "--symbol", "600000", "--shares", "100", "--price", "10") == 0
    assert "Position added successfully" in capsys.readouterr().out
    assert run("add", "-s", "600000.SH", "-n", "100", "-p", "12", "-t", "浦发银行") == 0
    out = capsys.readouterr().out
    assert "Position updated successfully" in out
    assert "600000.SH 浦发银行: 200 shares @ 11.00" in out

    (position,) = read_portfolio(run)
    assert position["symbol"] == "600000.SH"
    assert position["shares"] == 200
    assert position["purchasePrice"] == pytest.approx(11.0)
    assert position["name"] == "浦发银行"


def test_remove(run, capsys):
    run("add", "--symbol", "000001", "--shares", "100", "--price", "10")
    assert run("remove", "--symbol", "600000") == 0
    assert "Position 600000 not found" in capsys.readouterr().out
    assert len(read_portfolio(run)) == 1

    assert run("remove", "-s", "000001") == 0
    assert "Position removed successfully" in capsys.readouterr().out
    assert read_portfolio(run) == []


def test_view_plain(run, capsys, monkeypatch):
    class FakeClient:
        def __init__(self, cfg, api_key=""):
            pass

        def __call__(self, symbol):
            return make_quote(symbol, 11.0) if symbol == "600000.SH" else None

    monkeypatch.setattr(cli, "QuoteClient", FakeClient)
    run("add", "--symbol", "600000", "--shares", "100", "--price", "10")
    run("add", "--symbol", "000001", "--shares", "100", "--price", "10")
    capsys.readouterr()

    assert run("view", "--plain") == 0
    out = capsys.readouterr().out
    assert "600000.SH" in out
    assert "000001.SZ" not in out
    assert "totalCost=1000.0" in out
    assert "totalReturnPct=10.0" in out


def test_monitor_uses_interval_flag(run, monkeypatch):
    seen = {}

    class FakeMonitor:
        def __init__(self, state, fetch, console=None, interval=None, min_spacing=None):
            seen.update(interval=interval, min_spacing=min_spacing)

        def run(self):
            return 0

    monkeypatch.setattr(cli, "Monitor", FakeMonitor)
    assert run("monitor", "--interval", "5") == 0
    assert seen == {"interval": 5.0, "min_spacing": 1.0}


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["frobnicate"],
        ["config"],
        ["add", "--symbol", "600000", "--shares", "100"],
        ["add", "--symbol", "600000", "--shares", "-1", "--price", "10"],
        ["add", "--symbol", "600000", "--shares", "ten", "--price", "10"],
        ["remove"],
        ["monitor", "--interval", "0"],
    ],
)
def test_invalid_invocation_exits_with_usage(run, capsys, argv):
    with pytest.raises(SystemExit) as excinfo:
        run(*argv)
    assert excinfo.value.code == 2
    assert "usage:" in capsys.readouterr().err


def test_positive_number_keeps_integers():
    assert cli.positive_number("100") == 100
    assert isinstance(cli.positive_number("100"), int)
    assert cli.positive_number("10.5") == 10.5


def test_config_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("STOCKMON_HOME", str(tmp_path))
    monkeypatch.setenv("QUOTE_SOURCE", "Tushare")
    monkeypatch.setenv("REQUEST_TIMEOUT", "3")
    monkeypatch.setenv("MONITOR_INTERVAL", "30")
    cfg = Config.from_env()
    assert cfg.data_dir == str(tmp_path)
    assert cfg.quote_source == "tushare"
    assert cfg.request_timeout == 3.0
    assert cfg.monitor_interval == 30.0
    assert cfg.portfolio_file == tmp_path / "portfolio.json"


def test_config_from_env_rejects_unknown_source(monkeypatch):
    monkeypatch.setenv("QUOTE_SOURCE", "bloomberg")
    assert Config.from_env().quote_source == "auto"


def test_completion_prints_shell_hook(run, capsys):
    assert run("completion") == 0
    out = capsys.readouterr().out
    assert "stockmon" in out
    assert "complete" in out
    assert not (run.data_dir / "config.json").exists()
