"""Builders for AWS request payloads."""

from .bucket import build_public_access_block, build_public_read_policy, build_website_configuration
from .distribution import build_distribution_config
from .records import build_alias_change_batch, build_validation_change_batch

__all__ = [
    "build_public_access_block",
    "build_public_read_policy",
    "build_website_configuration",
    "build_distribution_config",
    "build_alias_change_batch",
    "build_validation_change_batch",
]
