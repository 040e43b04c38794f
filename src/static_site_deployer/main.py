"""Command line entry points for the static site deployer."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Sequence

from . import constants
from . import logging as structured_logging
from . import metrics
from .config import Settings, load_settings
from .exceptions import DeployError
from .handlers.base import AWS_ERRORS
from .handlers.bucket import BucketProvisioner
from .handlers.cdn import CdnProvisioner
from .services.aws.client import AWSProvider
from .services.aws.models import BucketSiteResult, CdnSiteResult
from .services.base import StaticSiteProvider
from .tracing import initialize_tracing, shutdown_tracing
from .utils.context import with_run_id
from .utils.errors import sanitize_exception

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[Settings], StaticSiteProvider]

BANNER = "=" * 74


class UsageArgumentParser(argparse.ArgumentParser):
    """Argument parser exiting with status 1 on bad usage."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(constants.EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_bucket_parser() -> argparse.ArgumentParser:
    parser = UsageArgumentParser(
        prog="deploy-static-site",
        description=(
            "Create an S3 bucket, open it for public reads, sync a local build "
            "directory into it and enable static website hosting."
        ),
    )
    parser.add_argument("domain", metavar="DOMAIN_NAME", help="domain the site will be served from")
    parser.add_argument("bucket", metavar="BUCKET_NAME", help="globally unique bucket name")
    parser.add_argument("local_dir", metavar="LOCAL_BUILD_DIR", help="directory to mirror into the bucket")
    return parser


def build_cdn_parser() -> argparse.ArgumentParser:
    parser = UsageArgumentParser(
        prog="deploy-cloudfront-dist",
        description=(
            "Request a DNS-validated ACM certificate, create a CloudFront distribution "
            "in front of an S3 bucket and point a Route 53 ALIAS record at it."
        ),
    )
    parser.add_argument("bucket", metavar="BUCKET_NAME", help="origin bucket")
    parser.add_argument("domain", metavar="DOMAIN_NAME", help="domain to serve the distribution from")
    return parser


def default_provider(settings: Settings) -> StaticSiteProvider:
    return AWSProvider(region=settings.region)


def print_bucket_summary(result: BucketSiteResult) -> None:
    print("")
    print("===========================================")
    print(f"Static site deployed to s3://{result.bucket}/")
    print(f"Uploaded {len(result.sync.uploaded)}, deleted {len(result.sync.deleted)}, unchanged {result.sync.unchanged}")
    print("Website endpoint:")
    print(result.website_endpoint)
    print("===========================================")
    print("")
    print(f"Optional: Point your domain ({result.domain}) to the above endpoint using Route 53 or your DNS provider.")


def print_cdn_summary(result: CdnSiteResult) -> None:
    print("")
    print(BANNER)
    print("SUCCESS! CloudFront distribution is deploying; it may take ~15 minutes.")
    print(f"Once deployed, https://{result.domain}/ will serve content from S3 bucket:")
    print(f"  s3://{result.bucket}")
    print("")
    print(f"Distribution ID:       {result.distribution.id}")
    print(f"CloudFront Domain:     {result.distribution.domain_name}")
    print(f"Certificate ARN:       {result.certificate_arn}")
    print(f"Route53 Hosted Zone:   {result.hosted_zone_id}")
    print("")
    print("Next steps:")
    print(f"  - Upload your static files to s3://{result.bucket}.")
    print(f"  - Confirm your site is accessible via https://{result.domain}/.")
    print("  - (Optional) Configure bucket policy/origin access if you want a private S3 origin.")
    print(BANNER)


def _run(pipeline: str, settings: Settings, run: Callable[[], None]) -> int:
    """Run a pipeline body, mapping failures to exit codes."""
    initialize_tracing()
    try:
        with with_run_id():
            run()
        return constants.EXIT_OK
    except DeployError as e:
        logger.error(f"Error: {sanitize_exception(e)}")
        return e.exit_code
    except AWS_ERRORS as e:
        logger.error(f"Error: {sanitize_exception(e)}")
        return constants.EXIT_FAILURE
    except KeyboardInterrupt:
        logger.error("Interrupted; resources created so far are left in place.")
        return constants.EXIT_INTERRUPTED
    finally:
        metrics.push_metrics(settings.pushgateway, job=f"static-site-deployer-{pipeline}")
        shutdown_tracing()


def _load_settings() -> Settings | None:
    try:
        return load_settings()
    except DeployError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


def deploy_static_site(
    argv: Sequence[str] | None = None,
    provider_factory: ProviderFactory = default_provider,
) -> int:
    """Run the Bucket Provisioner.

    Usage: deploy-static-site <DOMAIN_NAME> <BUCKET_NAME> <LOCAL_BUILD_DIR>
    """
    args = build_bucket_parser().parse_args(argv)
    settings = _load_settings()
    if settings is None:
        return constants.EXIT_FAILURE
    structured_logging.setup_structured_logging(settings.log_level)

    def run() -> None:
        handler = BucketProvisioner(provider_factory(settings), args.domain, args.bucket, args.local_dir)
        print_bucket_summary(handler.run())

    return _run(constants.PIPELINE_BUCKET, settings, run)


def deploy_cloudfront_dist(
    argv: Sequence[str] | None = None,
    provider_factory: ProviderFactory = default_provider,
) -> int:
    """Run the CDN Provisioner.

    Usage: deploy-cloudfront-dist <BUCKET_NAME> <DOMAIN_NAME>
    """
    args = build_cdn_parser().parse_args(argv)
    settings = _load_settings()
    if settings is None:
        return constants.EXIT_FAILURE
    structured_logging.setup_structured_logging(settings.log_level)

    def run() -> None:
        handler = CdnProvisioner(provider_factory(settings), args.bucket, args.domain, settings=settings)
        print_cdn_summary(handler.run())

    return _run(constants.PIPELINE_CDN, settings, run)


def bucket_main() -> None:
    sys.exit(deploy_static_site())


def cdn_main() -> None:
    sys.exit(deploy_cloudfront_dist())
