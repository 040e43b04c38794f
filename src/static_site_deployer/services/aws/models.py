"""Models for AWS provisioning operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CertificateStatus(str, Enum):
    """ACM certificate status values."""

    PENDING_VALIDATION = "PENDING_VALIDATION"
    IN_PROGRESS = "IN_PROGRESS"
    ISSUED = "ISSUED"
    FAILED = "FAILED"
    NOT_VALIDATED = "NOT_VALIDATED"
    VALIDATION_TIMED_OUT = "VALIDATION_TIMED_OUT"
    REVOKED = "REVOKED"
    EXPIRED = "EXPIRED"
    INACTIVE = "INACTIVE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> CertificateStatus:
        """Map an API value to a status, UNKNOWN for anything unrecognised."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_pending(self) -> bool:
        return self in (CertificateStatus.PENDING_VALIDATION, CertificateStatus.IN_PROGRESS)

    @property
    def is_issued(self) -> bool:
        return self is CertificateStatus.ISSUED

    @property
    def is_failed(self) -> bool:
        return not (self.is_pending or self.is_issued)


@dataclass(frozen=True)
class ValidationRecord:
    """DNS record ACM asks for to prove domain ownership."""

    name: str
    value: str
    type: str = "CNAME"

    @classmethod
    def from_validation_options(cls, options: list[dict[str, Any]]) -> ValidationRecord | None:
        """Build from ``DomainValidationOptions``; None until ACM has populated it."""
        if not options:
            return None
        record = options[0].get("ResourceRecord") or {}
        name = record.get("Name")
        value = record.get("Value")
        if not name or not value or name == "null" or value == "null":
            return None
        return cls(name=name, value=value, type=record.get("Type") or "CNAME")


@dataclass(frozen=True)
class Distribution:
    """A created CloudFront distribution."""

    id: str
    domain_name: str
    arn: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> Distribution:
        dist = response["Distribution"]
        return cls(
            id=dist["Id"],
            domain_name=dist["DomainName"],
            arn=dist.get("ARN"),
            raw=response,
        )


@dataclass
class SyncResult:
    """Outcome of mirroring a directory into a bucket."""

    uploaded: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    unchanged: int = 0


@dataclass
class BucketSiteResult:
    """Summary of a completed Bucket Provisioner run."""

    domain: str
    bucket: str
    region: str
    website_endpoint: str
    sync: SyncResult


@dataclass
class CdnSiteResult:
    """Summary of a completed CDN Provisioner run."""

    domain: str
    bucket: str
    hosted_zone_id: str
    certificate_arn: str
    distribution: Distribution
    alias_zone_id: str
