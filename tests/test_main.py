from decimal import Decimal

from order_desk import main as cli
from order_desk.models import StatsData
from order_desk.result import Err, Ok


class FakeClient:
    stats = Ok(StatsData(daily_earnings=Decimal("10")))

    def __init__(self, credentials, base_url):
        self.credentials = credentials
        self.base_url = base_url
        self.closed = False

    def fetch_stats(self):
        return self.stats

    def close(self):
        self.closed = True


def test_parser_defaults():
    args = cli.build_parser().parse_args(["waiter", "--cart", "bar"])

    assert args.command == "waiter"
    assert args.cart == "bar"
    assert args.debug is False


def test_export_stats_writes_both_files(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(cli, "DashboardClient", FakeClient)
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)

    code = cli.main(["--token", "t", "export-stats", "--out", str(tmp_path)])

    assert code == 0
    printed = capsys.readouterr().out.split()
    assert [p.rsplit(".", 1)[1] for p in printed] == ["csv", "xlsx"]
    assert sorted(path.suffix for path in tmp_path.iterdir()) == [".csv", ".xlsx"]


def test_export_stats_reports_api_error(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(cli, "DashboardClient", FakeClient)
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)
    monkeypatch.setattr(FakeClient, "stats", Err("You don't have permission to view stats."))

    code = cli.main(["export-stats", "--out", str(tmp_path)])

    assert code == 1
    assert "permission to view stats" in capsys.readouterr().err
    assert list(tmp_path.iterdir()) == []
