"""CDN Provisioner: CloudFront in front of an S3 origin with ACM and Route53."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Callable

from .. import constants, metrics
from ..builders.distribution import build_distribution_config
from ..builders.records import build_alias_change_batch, build_validation_change_batch
from ..config import Settings
from ..exceptions import CertificateFailedError, DeployError, PreconditionError, WaitTimeoutError
from ..services.aws.models import CdnSiteResult, CertificateStatus, Distribution, ValidationRecord
from ..services.base import StaticSiteProvider
from ..utils.polling import poll_until
from .base import BaseHandler

logger = logging.getLogger(__name__)


class CdnProvisioner(BaseHandler):
    """Provision a CloudFront distribution for a bucket, reachable at a domain.

    The order of the steps is load-bearing: the validation record must be in
    Route53 before issuance can converge, and the distribution is only created
    once the certificate has been observed as ISSUED. Every run requests a new
    certificate and creates a new distribution.
    """

    def __init__(
        self,
        provider: StaticSiteProvider,
        bucket: str,
        domain: str,
        settings: Settings | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(constants.PIPELINE_CDN, provider)
        self.bucket = bucket
        self.domain = domain
        self.settings = settings or Settings()
        self.sleep = sleep
        self.clock = clock
        self.issued = False

    def execute(self) -> CdnSiteResult:
        zone_id = self.run_step(
            constants.STEP_HOSTED_ZONE,
            f"Retrieving Route 53 hosted zone for domain: {self.domain} ...",
            self.provider.find_hosted_zone,
            self.domain,
        )
        self.require(
            bool(zone_id) and zone_id != "null",
            constants.STEP_HOSTED_ZONE,
            f"Error: Could not find a Route 53 hosted zone for '{self.domain}'. "
            "Make sure the domain's hosted zone exists in Route 53 in this account.",
        )
        self.log_info(constants.STEP_HOSTED_ZONE, f"Found hosted zone ID: {zone_id}", hosted_zone_id=zone_id)

        certificate_arn = self.run_step(
            constants.STEP_REQUEST_CERT,
            f"Requesting ACM certificate in {constants.ACM_REGION} for domain: {self.domain} ...",
            self.provider.request_certificate,
            self.domain,
        )
        self.log_info(constants.STEP_REQUEST_CERT, f"Certificate ARN: {certificate_arn}", certificate_arn=certificate_arn)

        record = self.run_step(
            constants.STEP_VALIDATION_RECORD,
            "Retrieving DNS validation record details...",
            self.wait_for_validation_record,
            certificate_arn,
        )

        self.run_step(
            constants.STEP_UPSERT_VALIDATION,
            f"Creating DNS validation record in Route 53: {record.name} -> {record.value}",
            self.provider.change_record_sets,
            zone_id,
            build_validation_change_batch(self.domain, record),
        )

        self.run_step(
            constants.STEP_WAIT_ISSUED,
            "Waiting for certificate to be issued (this can take a few minutes)...",
            self.wait_for_issuance,
            certificate_arn,
        )

        distribution = self.run_step(
            constants.STEP_CREATE_DISTRIBUTION,
            "Creating CloudFront distribution. This may take a few minutes...",
            self.create_distribution,
            certificate_arn,
        )

        alias_zone_id = self.run_step(
            constants.STEP_CLOUDFRONT_ZONE,
            "Resolving CloudFront hosted zone ID for the alias target...",
            self.resolve_alias_zone_id,
            distribution,
        )

        self.run_step(
            constants.STEP_UPSERT_ALIAS,
            f"Creating/updating Route 53 ALIAS record: {self.domain} -> {distribution.domain_name} ...",
            self.provider.change_record_sets,
            zone_id,
            build_alias_change_batch(self.domain, distribution.id, distribution.domain_name, alias_zone_id),
        )

        return CdnSiteResult(
            domain=self.domain,
            bucket=self.bucket,
            hosted_zone_id=zone_id,
            certificate_arn=certificate_arn,
            distribution=distribution,
            alias_zone_id=alias_zone_id,
        )

    def wait_for_validation_record(self, certificate_arn: str) -> ValidationRecord:
        """Wait for ACM to publish the DNS validation record.

        ACM fills in ``DomainValidationOptions`` shortly after the request, so
        the first read happens after the settle delay and is retried until the
        validation timeout.
        """
        try:
            return poll_until(
                lambda: self.provider.get_validation_record(certificate_arn),
                lambda record: record is not None,
                what="DNS validation record",
                interval=self.settings.validation_poll_interval,
                timeout=self.settings.validation_timeout,
                initial_delay=self.settings.validation_settle_delay,
                sleep=self.sleep,
                clock=self.clock,
            )
        except WaitTimeoutError as e:
            raise PreconditionError(
                "Error: Could not retrieve DNS validation records from ACM. Check ACM console or logs."
            ) from e

    def _observe_status(self, certificate_arn: str) -> CertificateStatus:
        status = self.provider.get_certificate_status(certificate_arn)
        metrics.certificate_polls_total.labels(status=status.value).inc()
        self.log_info(
            constants.STEP_WAIT_ISSUED,
            f"Current certificate status: {status.value}",
            event="polled",
            status=status.value,
        )
        return status

    def _check_status(self, certificate_arn: str, status: CertificateStatus) -> bool:
        if status.is_issued:
            return True
        if status.is_failed:
            raise CertificateFailedError(certificate_arn, status.value)
        return False

    def wait_for_issuance(self, certificate_arn: str) -> CertificateStatus:
        """Poll the certificate until it is ISSUED.

        Raises:
            CertificateFailedError: If the certificate reaches a failure status
            WaitTimeoutError: If the configured deadline passes first
        """
        status = poll_until(
            lambda: self._observe_status(certificate_arn),
            lambda current: self._check_status(certificate_arn, current),
            what=f"certificate {certificate_arn} to be issued",
            interval=self.settings.cert_poll_interval,
            backoff=self.settings.cert_poll_backoff,
            max_interval=self.settings.cert_poll_max_interval,
            timeout=self.settings.cert_wait_timeout,
            sleep=self.sleep,
            clock=self.clock,
        )
        self.issued = True
        self.log_info(constants.STEP_WAIT_ISSUED, "Certificate has been issued!", event="issued")
        return status

    def create_distribution(self, certificate_arn: str) -> Distribution:
        """Create the distribution and save the raw response next to the run."""
        if not self.issued:
            raise PreconditionError("Refusing to create a distribution before the certificate is issued.")

        config = build_distribution_config(self.bucket, self.domain, certificate_arn)
        response = self.provider.create_distribution(config)
        self._write_output(response)

        distribution = Distribution.from_response(response)
        self.log_info(
            constants.STEP_CREATE_DISTRIBUTION,
            "CloudFront distribution created!",
            event="created",
            distribution_id=distribution.id,
            distribution_domain=distribution.domain_name,
        )
        return distribution

    def _write_output(self, response: dict[str, Any]) -> None:
        path = Path(self.settings.dist_output_file)
        # LastModifiedTime is a datetime
        try:
            path.write_text(json.dumps(response, indent=2, default=str))
        except OSError as e:
            raise DeployError(f"Failed to write {path}: {e}") from e
        logger.info(f"Wrote create-distribution response to {path}")

    def resolve_alias_zone_id(self, distribution: Distribution) -> str:
        """Find CloudFront's hosted zone id for the alias target.

        Falls back to the global CloudFront zone id when the lookup yields
        nothing.
        """
        current = self.provider.get_distribution(distribution.id)
        domain_name = current.get("Distribution", {}).get("DomainName") or distribution.domain_name
        zone_id = self.provider.find_distribution_hosted_zone_id(domain_name)
        if not zone_id or zone_id == "None":
            self.log_warning(
                constants.STEP_CLOUDFRONT_ZONE,
                f"No hosted zone ID listed for {domain_name}, "
                f"falling back to the global CloudFront hosted zone ID {constants.CLOUDFRONT_HOSTED_ZONE_ID}",
                event="fallback",
                distribution_domain=domain_name,
            )
            return constants.CLOUDFRONT_HOSTED_ZONE_ID
        return zone_id
