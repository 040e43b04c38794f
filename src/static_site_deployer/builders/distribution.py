"""Builder for the CloudFront distribution configuration."""

from __future__ import annotations

import time
from typing import Any

from .. import constants


def origin_id(bucket_name: str) -> str:
    return f"S3-{bucket_name}"


def caller_reference(now: float | None = None) -> str:
    """Unique reference CloudFront uses to de-duplicate create requests."""
    return f"cf-{int(time.time() if now is None else now)}"


def build_distribution_config(
    bucket_name: str,
    domain: str,
    certificate_arn: str,
    reference: str | None = None,
) -> dict[str, Any]:
    """Create the ``DistributionConfig`` for an S3-backed static site.

    The bucket is used as a plain S3 origin without an origin access identity,
    so it must already allow public reads.

    Args:
        bucket_name: Origin bucket
        domain: Alternate domain name served by the distribution
        certificate_arn: Issued ACM certificate (us-east-1) covering ``domain``
        reference: Caller reference; derived from the current time if omitted

    Returns:
        Distribution configuration dict
    """
    target = origin_id(bucket_name)
    methods = list(constants.ALLOWED_METHODS)

    return {
        "CallerReference": reference or caller_reference(),
        "Comment": f"CloudFront distribution for {bucket_name} -> {domain}",
        "Aliases": {"Quantity": 1, "Items": [domain]},
        "DefaultRootObject": constants.DEFAULT_ROOT_OBJECT,
        "Enabled": True,
        "Origins": {
            "Quantity": 1,
            "Items": [
                {
                    "Id": target,
                    "DomainName": f"{bucket_name}.s3.amazonaws.com",
                    "OriginPath": "",
                    "CustomHeaders": {"Quantity": 0},
                    "S3OriginConfig": {"OriginAccessIdentity": ""},
                }
            ],
        },
        "DefaultCacheBehavior": {
            "TargetOriginId": target,
            "ViewerProtocolPolicy": constants.VIEWER_PROTOCOL_POLICY,
            "AllowedMethods": {
                "Quantity": len(methods),
                "Items": methods,
                "CachedMethods": {"Quantity": len(methods), "Items": list(methods)},
            },
            "Compress": True,
            "ForwardedValues": {
                "QueryString": False,
                "Cookies": {"Forward": "none"},
            },
            "MinTTL": constants.CACHE_MIN_TTL,
            "DefaultTTL": constants.CACHE_DEFAULT_TTL,
            "MaxTTL": constants.CACHE_MAX_TTL,
        },
        "PriceClass": constants.PRICE_CLASS,
        "Restrictions": {
            "GeoRestriction": {"RestrictionType": "none", "Quantity": 0},
        },
        "ViewerCertificate": {
            "ACMCertificateArn": certificate_arn,
            "SSLSupportMethod": constants.SSL_SUPPORT_METHOD,
            "MinimumProtocolVersion": constants.MINIMUM_PROTOCOL_VERSION,
        },
        "HttpVersion": constants.HTTP_VERSION,
        "IsIPV6Enabled": True,
    }
