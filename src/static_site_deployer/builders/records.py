"""Builders for Route53 change batches.

Both batches use ``UPSERT`` so applying the same batch twice leaves a single
record behind.
"""

from __future__ import annotations

from typing import Any

from ..constants import VALIDATION_RECORD_TTL
from ..services.aws.models import ValidationRecord


def build_validation_change_batch(domain: str, record: ValidationRecord) -> dict[str, Any]:
    """Change batch publishing the ACM DNS validation record."""
    return {
        "Comment": f"ACM Certificate Validation for {domain}",
        "Changes": [
            {
                "Action": "UPSERT",
                "ResourceRecordSet": {
                    "Name": record.name,
                    "Type": record.type,
                    "TTL": VALIDATION_RECORD_TTL,
                    "ResourceRecords": [{"Value": record.value}],
                },
            }
        ],
    }


def build_alias_change_batch(
    domain: str,
    distribution_id: str,
    distribution_domain: str,
    alias_zone_id: str,
) -> dict[str, Any]:
    """Change batch pointing ``domain`` at a CloudFront distribution.

    Args:
        domain: Record name
        distribution_id: Used in the batch comment only
        distribution_domain: ``dxxxx.cloudfront.net`` name of the distribution
        alias_zone_id: CloudFront's hosted zone id
    """
    return {
        "Comment": f"Alias to CloudFront distribution {distribution_id}",
        "Changes": [
            {
                "Action": "UPSERT",
                "ResourceRecordSet": {
                    "Name": domain,
                    "Type": "A",
                    "AliasTarget": {
                        "HostedZoneId": alias_zone_id,
                        "DNSName": distribution_domain,
                        "EvaluateTargetHealth": False,
                    },
                },
            }
        ],
    }
