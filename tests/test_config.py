"""Tests for configuration loading and validation."""

import dataclasses
from decimal import Decimal

import pytest

from cleanconnect.config import (
    AppConfig,
    NotificationConfig,
    PersistenceConfig,
    PricingConfig,
    SchedulingConfig,
    _safe_bool,
    _safe_decimal,
    _safe_int,
    _validate_config,
)


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        _validate_config(AppConfig())  # should not raise

    def test_defaults(self):
        config = AppConfig()
        assert config.pricing.commission_rate == Decimal("0.18")
        assert config.pricing.processing_fee_rate == Decimal("0.029")
        assert config.pricing.processing_fee_fixed == Decimal("0.30")
        assert config.scheduling.default_duration_minutes == 120

    def test_commission_rate_out_of_range(self):
        config = AppConfig(pricing=PricingConfig(commission_rate=Decimal("1.5")))
        with pytest.raises(ValueError, match="COMMISSION_RATE"):
            _validate_config(config)

    def test_negative_fixed_fee(self):
        config = AppConfig(pricing=PricingConfig(processing_fee_fixed=Decimal("-0.30")))
        with pytest.raises(ValueError, match="PROCESSING_FEE_FIXED"):
            _validate_config(config)

    def test_zero_duration(self):
        config = AppConfig(scheduling=SchedulingConfig(default_duration_minutes=0))
        with pytest.raises(ValueError, match="DEFAULT_DURATION_MINUTES"):
            _validate_config(config)

    def test_non_positive_channel_timeout(self):
        config = AppConfig(notifications=NotificationConfig(channel_timeout_sec=0))
        with pytest.raises(ValueError, match="CHANNEL_TIMEOUT_SEC"):
            _validate_config(config)

    def test_non_positive_store_timeout(self):
        config = AppConfig(persistence=PersistenceConfig(write_timeout_sec=-1))
        with pytest.raises(ValueError, match="STORE_WRITE_TIMEOUT_SEC"):
            _validate_config(config)

    def test_config_is_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            AppConfig().log_level = "DEBUG"


class TestEnvParsing:
    def test_safe_int_reads_env(self, monkeypatch):
        monkeypatch.setenv("TEST_INT", "42")
        assert _safe_int("TEST_INT", "1") == 42

    def test_safe_int_bad_value(self, monkeypatch):
        monkeypatch.setenv("TEST_INT", "forty")
        with pytest.raises(ValueError, match="TEST_INT"):
            _safe_int("TEST_INT", "1")

    def test_safe_decimal_default(self, monkeypatch):
        monkeypatch.delenv("TEST_DEC", raising=False)
        assert _safe_decimal("TEST_DEC", "0.18") == Decimal("0.18")

    def test_safe_decimal_bad_value(self, monkeypatch):
        monkeypatch.setenv("TEST_DEC", "18%")
        with pytest.raises(ValueError, match="TEST_DEC"):
            _safe_decimal("TEST_DEC", "0.18")

    @pytest.mark.parametrize("raw,expected", [("true", True), ("0", False), ("Off", False)])
    def test_safe_bool(self, monkeypatch, raw, expected):
        monkeypatch.setenv("TEST_BOOL", raw)
        assert _safe_bool("TEST_BOOL", "true") is expected

    def test_safe_bool_bad_value(self, monkeypatch):
        monkeypatch.setenv("TEST_BOOL", "maybe")
        with pytest.raises(ValueError, match="TEST_BOOL"):
            _safe_bool("TEST_BOOL", "true")
