"""Provisioning pipelines."""

from .base import BaseHandler
from .bucket import BucketProvisioner
from .cdn import CdnProvisioner

__all__ = ["BaseHandler", "BucketProvisioner", "CdnProvisioner"]
