"""
Tests for configuration and structured logging
"""

import json
import logging

from ledger_core import config as config_module
from ledger_core.config import LedgerConfig, get_config, reload_config
from ledger_core.logging_config import JSONFormatter, log_action, setup_logging


class TestLedgerConfig:
    """Test pydantic-settings configuration"""

    def test_defaults(self):
        config = LedgerConfig()

        assert config.api_port == 8090
        assert config.checking_transaction_fee == "2.50"
        assert config.checking_free_transactions == 10
        assert config.savings_minimum_balance == "100.00"
        assert config.savings_monthly_interest_rate == "0.02"
        assert config.savings_max_withdrawals_per_month == 5
        assert config.max_transaction_amount == "100000.00"
        assert config.enable_events is True

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("LEDGER_CHECKING_FREE_TRANSACTIONS", "3")
        monkeypatch.setenv("LEDGER_SAVINGS_MINIMUM_BALANCE", "250.00")

        config = LedgerConfig()

        assert config.checking_free_transactions == 3
        assert config.savings_minimum_balance == "250.00"

    def test_reload_config(self, monkeypatch):
        original = get_config()
        monkeypatch.setenv("LEDGER_API_PORT", "9999")
        try:
            reloaded = reload_config()
            assert reloaded.api_port == 9999
            assert get_config() is reloaded
        finally:
            monkeypatch.setattr(config_module, "config", original)


class TestStructuredLogging:
    """Test JSON log output"""

    def _record(self, **extra):
        record = logging.LogRecord(
            name="ledger_core.ledger", level=logging.INFO, pathname=__file__, lineno=1,
            msg="deposit recorded", args=(), exc_info=None
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_json_formatter(self):
        record = self._record(
            action="deposit", resource="account:ACC-00000001", extra={"amount": "10.00"}
        )

        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "ledger_core.ledger"
        assert entry["message"] == "deposit recorded"
        assert entry["action"] == "deposit"
        assert entry["resource"] == "account:ACC-00000001"
        assert entry["extra"] == {"amount": "10.00"}
        assert "timestamp" in entry

    def test_json_formatter_omits_missing_fields(self):
        entry = json.loads(JSONFormatter().format(self._record()))

        assert "action" not in entry
        assert "resource" not in entry

    def test_setup_logging_and_log_action(self, tmp_path):
        log_file = tmp_path / "ledger.log"
        logger = setup_logging(level="DEBUG", logger_name="ledger_core.test", log_file=str(log_file))

        log_action(
            logger, "warning", "withdraw failed",
            action="withdraw", resource="account:ACC-00000001",
            extra={"failure_code": "insufficient_funds"}
        )
        for handler in logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["level"] == "WARNING"
        assert entry["action"] == "withdraw"
        assert entry["extra"]["failure_code"] == "insufficient_funds"

        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    def test_setup_logging_replaces_handlers(self):
        logger = setup_logging(logger_name="ledger_core.test_replace")
        setup_logging(logger_name="ledger_core.test_replace", log_format="text")

        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
        logger.removeHandler(logger.handlers[0])
