"""Tests for AWS models."""

from __future__ import annotations

import pytest

from static_site_deployer.services.aws.models import CertificateStatus, Distribution, ValidationRecord


class TestCertificateStatus:
    """Test certificate status classification."""

    @pytest.mark.parametrize("value", ["PENDING_VALIDATION", "IN_PROGRESS"])
    def test_pending(self, value):
        status = CertificateStatus.parse(value)
        assert status.is_pending
        assert not status.is_failed

    def test_issued(self):
        status = CertificateStatus.parse("ISSUED")
        assert status.is_issued
        assert not status.is_failed

    @pytest.mark.parametrize("value", ["FAILED", "NOT_VALIDATED", "VALIDATION_TIMED_OUT", "REVOKED", "EXPIRED"])
    def test_terminal_failures(self, value):
        assert CertificateStatus.parse(value).is_failed

    def test_unknown_value(self):
        """Test that unrecognised statuses are treated as failures."""
        status = CertificateStatus.parse("SOMETHING_NEW")
        assert status is CertificateStatus.UNKNOWN
        assert status.is_failed
        assert CertificateStatus.parse(None) is CertificateStatus.UNKNOWN


class TestValidationRecord:
    """Test building validation records from ACM output."""

    def test_from_validation_options(self):
        options = [
            {
                "DomainName": "example.com",
                "ValidationMethod": "DNS",
                "ResourceRecord": {"Name": "_a.example.com.", "Type": "CNAME", "Value": "_b.acm-validations.aws."},
            }
        ]
        record = ValidationRecord.from_validation_options(options)
        assert record == ValidationRecord(name="_a.example.com.", value="_b.acm-validations.aws.", type="CNAME")

    @pytest.mark.parametrize(
        "options",
        [
            [],
            [{"DomainName": "example.com"}],
            [{"ResourceRecord": {"Name": "_a.example.com.", "Value": ""}}],
            [{"ResourceRecord": {"Name": "null", "Value": "null"}}],
        ],
    )
    def test_not_populated_yet(self, options):
        """Test that incomplete options yield None."""
        assert ValidationRecord.from_validation_options(options) is None


def test_distribution_from_response():
    """Test extracting id and domain from create_distribution output."""
    response = {"Distribution": {"Id": "E1", "DomainName": "d1.cloudfront.net", "ARN": "arn:x"}}
    distribution = Distribution.from_response(response)
    assert distribution.id == "E1"
    assert distribution.domain_name == "d1.cloudfront.net"
    assert distribution.raw is response
