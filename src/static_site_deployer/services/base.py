"""Provider interface used by the deployment pipelines."""

from __future__ import annotations

from typing import Any, Protocol

from .aws.models import CertificateStatus, ValidationRecord


class StaticSiteProvider(Protocol):
    """Protocol defining the cloud operations both pipelines rely on."""

    region: str

    def has_credentials(self) -> bool:
        """Check whether credentials could be resolved."""
        ...

    # S3

    def create_bucket(self, name: str) -> None:
        """Create a bucket in the provider's region."""
        ...

    def put_public_access_block(self, name: str, config: dict[str, bool]) -> None:
        """Set the bucket's public access block configuration."""
        ...

    def put_bucket_policy(self, name: str, policy: dict[str, Any]) -> None:
        """Attach a bucket policy."""
        ...

    def list_objects(self, name: str) -> list[dict[str, Any]]:
        """List every object in the bucket."""
        ...

    def upload_file(self, bucket: str, key: str, path: str, content_type: str) -> None:
        """Upload a local file to ``bucket/key``."""
        ...

    def delete_objects(self, bucket: str, keys: list[str]) -> None:
        """Delete the given keys."""
        ...

    def put_bucket_website(self, name: str, config: dict[str, Any]) -> None:
        """Enable static website hosting."""
        ...

    def website_endpoint(self, name: str) -> str:
        """Return the bucket's website endpoint URL."""
        ...

    # Route53

    def find_hosted_zone(self, domain: str) -> str | None:
        """Return the id of the hosted zone serving ``domain``, if any."""
        ...

    def change_record_sets(self, zone_id: str, change_batch: dict[str, Any]) -> str:
        """Apply a change batch and return the change id."""
        ...

    # ACM

    def request_certificate(self, domain: str) -> str:
        """Request a DNS-validated certificate and return its ARN."""
        ...

    def get_validation_record(self, certificate_arn: str) -> ValidationRecord | None:
        """Return the DNS validation record once ACM has populated it."""
        ...

    def get_certificate_status(self, certificate_arn: str) -> CertificateStatus:
        """Return the certificate's current status."""
        ...

    # CloudFront

    def create_distribution(self, config: dict[str, Any]) -> dict[str, Any]:
        """Create a distribution and return the raw response."""
        ...

    def get_distribution(self, distribution_id: str) -> dict[str, Any]:
        """Fetch a distribution by id."""
        ...

    def find_distribution_hosted_zone_id(self, domain_name: str) -> str | None:
        """Look up the hosted zone id reported for a distribution domain."""
        ...
