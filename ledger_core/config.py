"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class LedgerConfig(BaseSettings):
    """Ledger engine configuration"""

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8090
    api_workers: int = 1

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stdout

    # Checking account rules (decimals kept as strings)
    checking_transaction_fee: str = "2.50"
    checking_free_transactions: int = 10

    # Savings account rules
    savings_minimum_balance: str = "100.00"
    savings_monthly_interest_rate: str = "0.02"
    savings_max_withdrawals_per_month: int = 5

    # Largest amount accepted for a single deposit, withdrawal, transfer or opening
    max_transaction_amount: str = "100000.00"

    # Identifier formats
    account_id_prefix: str = "ACC-"
    account_id_width: int = 8
    transaction_id_prefix: str = "TXN-"
    transaction_id_width: int = 12

    # Feature flags
    enable_events: bool = True

    class Config:
        env_prefix = "LEDGER_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = LedgerConfig()


def get_config() -> LedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LedgerConfig:
    """Reload configuration from environment"""
    global config
    config = LedgerConfig()
    return config
