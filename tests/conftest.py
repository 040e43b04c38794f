"""Shared fixtures for the unit tests."""

from __future__ import annotations

from typing import Any

import pytest

from static_site_deployer.config import Settings
from static_site_deployer.services.aws.models import CertificateStatus, ValidationRecord


class FakeProvider:
    """In-memory stand-in for AWSProvider recording every call in order."""

    def __init__(self) -> None:
        self.region = "eu-west-1"
        self.credentials = True
        self.calls: list[str] = []
        self.hosted_zone: str | None = "Z123EXAMPLE"
        self.validation_records: list[ValidationRecord | None] = [
            ValidationRecord(name="_abc.example.com.", value="_xyz.acm-validations.aws."),
        ]
        self.statuses: list[CertificateStatus] = [CertificateStatus.ISSUED]
        self.cloudfront_zone_id: str | None = None
        self.records: dict[tuple[str, str, str], dict[str, Any]] = {}
        self.objects: dict[str, dict[str, Any]] = {}
        self.buckets: set[str] = set()
        self.policies: dict[str, dict[str, Any]] = {}
        self.websites: dict[str, dict[str, Any]] = {}
        self.distribution_configs: list[dict[str, Any]] = []
        self.failures: dict[str, Exception] = {}

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    def has_credentials(self) -> bool:
        return self.credentials

    def create_bucket(self, name: str) -> None:
        self._record("create_bucket")
        self.buckets.add(name)

    def put_public_access_block(self, name: str, config: dict[str, bool]) -> None:
        self._record("put_public_access_block")

    def put_bucket_policy(self, name: str, policy: dict[str, Any]) -> None:
        self._record("put_bucket_policy")
        self.policies[name] = policy

    def list_objects(self, name: str) -> list[dict[str, Any]]:
        self._record("list_objects")
        return list(self.objects.values())

    def upload_file(self, bucket: str, key: str, path: str, content_type: str) -> None:
        self._record("upload_file")
        self.objects[key] = {"Key": key, "Size": -1, "ETag": '"uploaded"', "ContentType": content_type}

    def delete_objects(self, bucket: str, keys: list[str]) -> None:
        self._record("delete_objects")
        for key in keys:
            self.objects.pop(key, None)

    def put_bucket_website(self, name: str, config: dict[str, Any]) -> None:
        self._record("put_bucket_website")
        self.websites[name] = config

    def website_endpoint(self, name: str) -> str:
        return f"http://{name}.s3-website-{self.region}.amazonaws.com"

    def find_hosted_zone(self, domain: str) -> str | None:
        self._record("find_hosted_zone")
        return self.hosted_zone

    def change_record_sets(self, zone_id: str, change_batch: dict[str, Any]) -> str:
        self._record("change_record_sets")
        for change in change_batch["Changes"]:
            assert change["Action"] == "UPSERT"
            record_set = change["ResourceRecordSet"]
            self.records[(zone_id, record_set["Name"], record_set["Type"])] = record_set
        return f"/change/C{len(self.calls)}"

    def request_certificate(self, domain: str) -> str:
        self._record("request_certificate")
        return "arn:aws:acm:us-east-1:123456789012:certificate/abc"

    def get_validation_record(self, certificate_arn: str) -> ValidationRecord | None:
        self._record("get_validation_record")
        if len(self.validation_records) > 1:
            return self.validation_records.pop(0)
        return self.validation_records[0]

    def get_certificate_status(self, certificate_arn: str) -> CertificateStatus:
        self._record("get_certificate_status")
        if len(self.statuses) > 1:
            return self.statuses.pop(0)
        return self.statuses[0]

    def create_distribution(self, config: dict[str, Any]) -> dict[str, Any]:
        self._record("create_distribution")
        self.distribution_configs.append(config)
        return {
            "Location": "https://cloudfront.amazonaws.com/2020-05-31/distribution/E1EXAMPLE",
            "ETag": "E2QWRUHEXAMPLE",
            "Distribution": {
                "Id": "E1EXAMPLE",
                "ARN": "arn:aws:cloudfront::123456789012:distribution/E1EXAMPLE",
                "DomainName": "d111111abcdef8.cloudfront.net",
                "Status": "InProgress",
            },
        }

    def get_distribution(self, distribution_id: str) -> dict[str, Any]:
        self._record("get_distribution")
        return {"Distribution": {"Id": distribution_id, "DomainName": "d111111abcdef8.cloudfront.net"}}

    def find_distribution_hosted_zone_id(self, domain_name: str) -> str | None:
        self._record("find_distribution_hosted_zone_id")
        return self.cloudfront_zone_id


class FakeClock:
    """Monotonic clock advanced only by its own sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture(autouse=True)
def fast_rate_limit(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the client-side rate limiter from slowing tests down."""
    monkeypatch.setattr("static_site_deployer.utils.rate_limit._AWS_RATE_LIMIT_PER_SECOND", 1_000_000.0)


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(dist_output_file=str(tmp_path / "create-dist-output.json"))
