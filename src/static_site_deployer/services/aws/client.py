"""AWS client implementation for S3, ACM, Route53 and CloudFront."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError

from ... import metrics
from ...constants import ACM_REGION, DEFAULT_REGION, DELETE_BATCH_SIZE, HOSTED_ZONE_PREFIX
from ...utils.rate_limit import rate_limit_aws, retry_on_throttling
from .models import CertificateStatus, ValidationRecord

logger = logging.getLogger(__name__)


def strip_zone_prefix(zone_id: str) -> str:
    """Turn ``/hostedzone/Z123`` into ``Z123``."""
    if zone_id.startswith(HOSTED_ZONE_PREFIX):
        return zone_id[len(HOSTED_ZONE_PREFIX):]
    return zone_id


class AWSProvider:
    """AWS provider implementation backed by boto3."""

    def __init__(
        self,
        region: str | None = None,
        session: boto3.session.Session | None = None,
    ) -> None:
        """Initialize AWS clients.

        Args:
            region: Region for the bucket; falls back to the session's region
            session: Optional pre-built boto3 session
        """
        self.session = session or boto3.session.Session(region_name=region)
        self.region = region or self.session.region_name or DEFAULT_REGION

        config = boto3.session.Config(signature_version="s3v4")

        self.s3_client = self.session.client("s3", region_name=self.region, config=config)
        # CloudFront only accepts certificates from us-east-1
        self.acm_client = self.session.client("acm", region_name=ACM_REGION)
        self.route53_client = self.session.client("route53")
        self.cloudfront_client = self.session.client("cloudfront")

    def _call(self, api_type: str, operation: str, method: Callable[..., Any], **kwargs: Any) -> Any:
        """Invoke an API method with rate limiting, throttling retries and metrics."""
        start_time = time.time()
        try:
            response = retry_on_throttling(api_type)(rate_limit_aws(method))(**kwargs)
            metrics.api_call_total.labels(api_type=api_type, operation=operation, result="success").inc()
            return response
        except ClientError:
            metrics.api_call_total.labels(api_type=api_type, operation=operation, result="error").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type=api_type, operation=operation).observe(duration)

    def has_credentials(self) -> bool:
        """Check whether boto3 can resolve credentials."""
        return self.session.get_credentials() is not None

    # S3

    def create_bucket(self, name: str) -> None:
        """Create a bucket.

        ``BucketAlreadyOwnedByYou`` is tolerated so the pipeline can be re-run;
        every other error, including a name taken by another account, raises.
        """
        create_params: dict[str, Any] = {"Bucket": name}
        # us-east-1 rejects an explicit LocationConstraint
        if self.region != "us-east-1":
            create_params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}

        try:
            self._call("s3", "create_bucket", self.s3_client.create_bucket, **create_params)
            logger.info(f"Created bucket {name} in region {self.region}")
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "BucketAlreadyOwnedByYou":
                logger.warning(f"Bucket {name} already exists and is owned by you, reusing it")
                return
            logger.error(f"Failed to create bucket {name}: {e}")
            raise

    def put_public_access_block(self, name: str, config: dict[str, bool]) -> None:
        """Set the bucket's public access block configuration."""
        try:
            self._call(
                "s3",
                "put_public_access_block",
                self.s3_client.put_public_access_block,
                Bucket=name,
                PublicAccessBlockConfiguration=config,
            )
        except ClientError as e:
            logger.error(f"Failed to set public access block for bucket {name}: {e}")
            raise

    def put_bucket_policy(self, name: str, policy: dict[str, Any]) -> None:
        """Set bucket policy."""
        policy_json = json.dumps(policy)
        logger.debug(f"Policy JSON for bucket {name}: {policy_json}")
        try:
            self._call("s3", "put_bucket_policy", self.s3_client.put_bucket_policy, Bucket=name, Policy=policy_json)
        except ClientError as e:
            logger.error(f"Failed to set policy for bucket {name}: {e}")
            logger.error(f"Bucket policy error details: {e.response}")
            raise

    def list_objects(self, name: str) -> list[dict[str, Any]]:
        """List every object in the bucket.

        Pages are requested one at a time with the continuation token so each
        request is rate limited and retried on its own.
        """
        objects: list[dict[str, Any]] = []
        params: dict[str, Any] = {"Bucket": name}
        try:
            while True:
                page = self._call("s3", "list_objects_v2", self.s3_client.list_objects_v2, **params)
                objects.extend(page.get("Contents", []))
                if not page.get("IsTruncated"):
                    return objects
                params["ContinuationToken"] = page["NextContinuationToken"]
        except ClientError as e:
            logger.error(f"Failed to list objects in bucket {name}: {e}")
            raise

    def upload_file(self, bucket: str, key: str, path: str, content_type: str) -> None:
        """Upload a local file to ``bucket/key``."""
        try:
            self._call(
                "s3",
                "upload_file",
                self.s3_client.upload_file,
                Filename=path,
                Bucket=bucket,
                Key=key,
                ExtraArgs={"ContentType": content_type},
            )
        except (ClientError, S3UploadFailedError) as e:
            logger.error(f"Failed to upload {path} to s3://{bucket}/{key}: {e}")
            raise

    def delete_objects(self, bucket: str, keys: list[str]) -> None:
        """Delete the given keys in batches of at most 1000."""
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            batch = keys[start:start + DELETE_BATCH_SIZE]
            try:
                response = self._call(
                    "s3",
                    "delete_objects",
                    self.s3_client.delete_objects,
                    Bucket=bucket,
                    Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
                )
            except ClientError as e:
                logger.error(f"Failed to delete objects from bucket {bucket}: {e}")
                raise
            errors = (response or {}).get("Errors", [])
            if errors:
                first = errors[0]
                raise ClientError(
                    {"Error": {"Code": first.get("Code", "DeleteFailed"), "Message": first.get("Message", "")}},
                    "DeleteObjects",
                )

    def put_bucket_website(self, name: str, config: dict[str, Any]) -> None:
        """Enable static website hosting."""
        try:
            self._call(
                "s3",
                "put_bucket_website",
                self.s3_client.put_bucket_website,
                Bucket=name,
                WebsiteConfiguration=config,
            )
        except ClientError as e:
            logger.error(f"Failed to enable website hosting for bucket {name}: {e}")
            raise

    def website_endpoint(self, name: str) -> str:
        """Return the bucket's website endpoint URL."""
        return f"http://{name}.s3-website-{self.region}.amazonaws.com"

    # Route53

    def find_hosted_zone(self, domain: str) -> str | None:
        """Find the hosted zone serving ``domain``.

        Walks up the name (``www.example.com`` then ``example.com``) because
        ``list_hosted_zones_by_name`` returns the zones sorted after the given
        name, which for a subdomain is not its parent zone.

        Returns:
            Zone id without the ``/hostedzone/`` prefix, or None
        """
        parts = domain.rstrip(".").lower().split(".")
        for i in range(len(parts) - 1):
            candidate = ".".join(parts[i:])
            try:
                response = self._call(
                    "route53",
                    "list_hosted_zones_by_name",
                    self.route53_client.list_hosted_zones_by_name,
                    DNSName=candidate,
                    MaxItems="1",
                )
            except ClientError as e:
                logger.error(f"Failed to look up hosted zone for {candidate}: {e}")
                raise
            for zone in response.get("HostedZones", []):
                zone_id = zone.get("Id")
                if zone.get("Name", "").rstrip(".").lower() == candidate and zone_id:
                    return strip_zone_prefix(zone_id)
        return None

    def change_record_sets(self, zone_id: str, change_batch: dict[str, Any]) -> str:
        """Apply a change batch and return the change id."""
        try:
            response = self._call(
                "route53",
                "change_resource_record_sets",
                self.route53_client.change_resource_record_sets,
                HostedZoneId=zone_id,
                ChangeBatch=change_batch,
            )
            return response.get("ChangeInfo", {}).get("Id", "")
        except ClientError as e:
            logger.error(f"Failed to change record sets in zone {zone_id}: {e}")
            raise

    # ACM

    def request_certificate(self, domain: str) -> str:
        """Request a DNS-validated certificate and return its ARN."""
        try:
            response = self._call(
                "acm",
                "request_certificate",
                self.acm_client.request_certificate,
                DomainName=domain,
                ValidationMethod="DNS",
            )
            return response["CertificateArn"]
        except ClientError as e:
            logger.error(f"Failed to request certificate for {domain}: {e}")
            raise

    def describe_certificate(self, certificate_arn: str) -> dict[str, Any]:
        """Fetch the ``Certificate`` block of ``describe_certificate``."""
        try:
            response = self._call(
                "acm",
                "describe_certificate",
                self.acm_client.describe_certificate,
                CertificateArn=certificate_arn,
            )
            return response.get("Certificate", {})
        except ClientError as e:
            logger.error(f"Failed to describe certificate {certificate_arn}: {e}")
            raise

    def get_validation_record(self, certificate_arn: str) -> ValidationRecord | None:
        """Return the DNS validation record once ACM has populated it."""
        certificate = self.describe_certificate(certificate_arn)
        return ValidationRecord.from_validation_options(certificate.get("DomainValidationOptions", []))

    def get_certificate_status(self, certificate_arn: str) -> CertificateStatus:
        """Return the certificate's current status."""
        certificate = self.describe_certificate(certificate_arn)
        status = CertificateStatus.parse(certificate.get("Status"))
        if status.is_failed and certificate.get("FailureReason"):
            logger.error(f"Certificate {certificate_arn} failure reason: {certificate['FailureReason']}")
        return status

    # CloudFront

    def create_distribution(self, config: dict[str, Any]) -> dict[str, Any]:
        """Create a distribution and return the raw response."""
        try:
            return self._call(
                "cloudfront",
                "create_distribution",
                self.cloudfront_client.create_distribution,
                DistributionConfig=config,
            )
        except ClientError as e:
            logger.error(f"Failed to create distribution: {e}")
            raise

    def get_distribution(self, distribution_id: str) -> dict[str, Any]:
        """Fetch a distribution by id."""
        try:
            return self._call(
                "cloudfront",
                "get_distribution",
                self.cloudfront_client.get_distribution,
                Id=distribution_id,
            )
        except ClientError as e:
            logger.error(f"Failed to get distribution {distribution_id}: {e}")
            raise

    def find_distribution_hosted_zone_id(self, domain_name: str) -> str | None:
        """Look up the hosted zone id listed for a distribution domain.

        Returns:
            The ``HostedZoneId`` of the matching list item, or None when no item
            matches or the item carries none
        """
        params: dict[str, Any] = {}
        try:
            while True:
                response = self._call(
                    "cloudfront", "list_distributions", self.cloudfront_client.list_distributions, **params
                )
                page = response.get("DistributionList", {})
                for item in page.get("Items", []) or []:
                    if item.get("DomainName") == domain_name:
                        return item.get("HostedZoneId") or None
                if not page.get("IsTruncated"):
                    return None
                params["Marker"] = page["NextMarker"]
        except ClientError as e:
            logger.error(f"Failed to list distributions: {e}")
            raise
