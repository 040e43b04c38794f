"""Bucket Provisioner: public S3 website hosting for a local build directory."""

from __future__ import annotations

import os

from .. import constants
from ..builders.bucket import build_public_access_block, build_public_read_policy, build_website_configuration
from ..services.aws.models import BucketSiteResult
from ..services.aws.sync import sync_directory
from ..services.base import StaticSiteProvider
from .base import BaseHandler


class BucketProvisioner(BaseHandler):
    """Create a publicly readable website bucket mirroring a local directory.

    Steps run strictly in order: create bucket, disable the public access
    block, attach the public-read policy, sync the directory (deleting remote
    objects missing locally) and enable website hosting.
    """

    def __init__(self, provider: StaticSiteProvider, domain: str, bucket: str, local_dir: str):
        super().__init__(constants.PIPELINE_BUCKET, provider)
        self.domain = domain
        self.bucket = bucket
        self.local_dir = local_dir

    def execute(self) -> BucketSiteResult:
        self.require(
            os.path.isdir(self.local_dir),
            constants.STEP_SYNC,
            f"Local build directory '{self.local_dir}' does not exist or is not a directory.",
        )

        self.run_step(
            constants.STEP_CREATE_BUCKET,
            f"Creating S3 bucket: s3://{self.bucket} ...",
            self.provider.create_bucket,
            self.bucket,
        )
        self.run_step(
            constants.STEP_PUBLIC_ACCESS,
            f"Disabling block public access on bucket {self.bucket} ...",
            self.provider.put_public_access_block,
            self.bucket,
            build_public_access_block(),
        )
        self.run_step(
            constants.STEP_BUCKET_POLICY,
            "Applying bucket policy to allow public reads ...",
            self.provider.put_bucket_policy,
            self.bucket,
            build_public_read_policy(self.bucket),
        )
        sync_result = self.run_step(
            constants.STEP_SYNC,
            f"Syncing local directory '{self.local_dir}' to s3://{self.bucket} ...",
            sync_directory,
            self.provider,
            self.bucket,
            self.local_dir,
        )
        self.run_step(
            constants.STEP_WEBSITE,
            f"Enabling static website hosting on {self.bucket} ...",
            self.provider.put_bucket_website,
            self.bucket,
            build_website_configuration(),
        )

        return BucketSiteResult(
            domain=self.domain,
            bucket=self.bucket,
            region=self.provider.region,
            website_endpoint=self.provider.website_endpoint(self.bucket),
            sync=sync_result,
        )
