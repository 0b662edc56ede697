import logging

from src.cli import main
from src.config import settings
from src.models.mortgage import AmortizationSystem


class TestCli:
    def test_schedule_yearly(self, capsys):
        assert main(["schedule", "120000", "24", "10", "--first", "2025-07-10", "--yearly"]) == 0
        out = capsys.readouterr().out
        assert "Installments:       24" in out
        assert "2027" in out

    def test_extra_payment(self, capsys):
        assert main(["extra", "120000", "120", "8", "--amount", "30000"]) == 0
        out = capsys.readouterr().out
        assert "Months reduced" in out
        assert "REDUCE_TERM" in out

    def test_scenarios(self, capsys):
        assert main(["scenarios", "10000", "12", "12", "--recurring", "900", "--once", "500:3"]) == 0
        out = capsys.readouterr().out
        assert "Scenario: Original" in out
        assert "Scenario: Com Aportes" in out
        assert "Comparison" in out

    def test_payoff(self, capsys):
        assert main(["payoff", "120000", "120", "0"]) == 0
        assert "Payoff amount" in capsys.readouterr().out

    def test_system_defaults_to_setting(self, capsys, monkeypatch):
        monkeypatch.setattr(settings, "default_amortization_system", AmortizationSystem.PRICE)
        assert main(["schedule", "300000", "360", "10", "--first", "2025-01-10"]) == 0
        out = capsys.readouterr().out
        assert "First installment:  2,537.67" in out
        assert "Last installment:   2,537.67" in out

    def test_configures_logging_from_settings(self, capsys, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        monkeypatch.setattr(settings, "log_level", "DEBUG")
        assert main(["payoff", "1000", "10", "0"]) == 0
        assert calls == [{"level": "DEBUG"}]
