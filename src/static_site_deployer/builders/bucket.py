"""Builders for bucket configurations."""

from __future__ import annotations

from typing import Any

from ..constants import ERROR_DOCUMENT, INDEX_DOCUMENT, POLICY_VERSION, PUBLIC_READ_SID


def build_public_access_block() -> dict[str, bool]:
    """Public access block with all four protections turned off."""
    return {
        "BlockPublicAcls": False,
        "IgnorePublicAcls": False,
        "BlockPublicPolicy": False,
        "RestrictPublicBuckets": False,
    }


def build_public_read_policy(bucket_name: str) -> dict[str, Any]:
    """Create a bucket policy granting anonymous ``s3:GetObject``.

    Args:
        bucket_name: Bucket the policy is attached to

    Returns:
        Policy document dict
    """
    return {
        "Version": POLICY_VERSION,
        "Statement": [
            {
                "Sid": PUBLIC_READ_SID,
                "Effect": "Allow",
                "Principal": "*",
                "Action": "s3:GetObject",
                "Resource": f"arn:aws:s3:::{bucket_name}/*",
            }
        ],
    }


def build_website_configuration(
    index_document: str = INDEX_DOCUMENT,
    error_document: str = ERROR_DOCUMENT,
) -> dict[str, Any]:
    return {
        "IndexDocument": {"Suffix": index_document},
        "ErrorDocument": {"Key": error_document},
    }
