"""Tests for environment configuration."""

from __future__ import annotations

import pytest

from static_site_deployer.config import Settings, load_settings
from static_site_deployer.exceptions import UsageError


class TestLoadSettings:
    """Test cases for load_settings."""

    def test_defaults(self):
        """Test defaults when nothing is set."""
        settings = load_settings({})
        assert settings == Settings()
        assert settings.cert_poll_interval == 10.0
        assert settings.cert_poll_backoff == 1.0
        assert settings.cert_wait_timeout == 3600.0
        assert settings.validation_settle_delay == 5.0
        assert settings.dist_output_file == "create-dist-output.json"
        assert settings.region is None

    def test_region_precedence(self):
        """Test that AWS_REGION wins over AWS_DEFAULT_REGION."""
        assert load_settings({"AWS_DEFAULT_REGION": "eu-west-1"}).region == "eu-west-1"
        assert load_settings({"AWS_REGION": "us-west-2", "AWS_DEFAULT_REGION": "eu-west-1"}).region == "us-west-2"

    def test_overrides(self):
        """Test numeric and string overrides."""
        settings = load_settings({
            "STATIC_SITE_CERT_POLL_INTERVAL": "2.5",
            "STATIC_SITE_CERT_POLL_BACKOFF": "2",
            "STATIC_SITE_DIST_OUTPUT_FILE": "/tmp/out.json",
            "PROMETHEUS_PUSHGATEWAY": "localhost:9091",
            "LOG_LEVEL": "debug",
        })
        assert settings.cert_poll_interval == 2.5
        assert settings.cert_poll_backoff == 2.0
        assert settings.dist_output_file == "/tmp/out.json"
        assert settings.pushgateway == "localhost:9091"
        assert settings.log_level == "DEBUG"

    def test_zero_timeout_means_unbounded(self):
        """Test that a zero deadline disables the timeout."""
        settings = load_settings({"STATIC_SITE_CERT_WAIT_TIMEOUT": "0", "STATIC_SITE_VALIDATION_TIMEOUT": "0"})
        assert settings.cert_wait_timeout is None
        assert settings.validation_timeout is None

    @pytest.mark.parametrize(
        "env",
        [
            {"STATIC_SITE_CERT_POLL_INTERVAL": "soon"},
            {"STATIC_SITE_CERT_POLL_INTERVAL": "0"},
            {"STATIC_SITE_CERT_WAIT_TIMEOUT": "-5"},
            {"STATIC_SITE_CERT_POLL_BACKOFF": "0.5"},
        ],
    )
    def test_invalid_values(self, env):
        """Test that bad numbers are usage errors."""
        with pytest.raises(UsageError):
            load_settings(env)
