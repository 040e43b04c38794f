"""Tests for the Bucket Provisioner pipeline."""

from __future__ import annotations

import pytest
from botocore.exceptions import ClientError

from static_site_deployer.exceptions import PreconditionError, ProviderError
from static_site_deployer.handlers.bucket import BucketProvisioner


@pytest.fixture
def build_dir(tmp_path):
    site = tmp_path / "build"
    (site / "css").mkdir(parents=True)
    (site / "index.html").write_text("<h1>hello</h1>")
    (site / "error.html").write_text("<h1>oops</h1>")
    (site / "css" / "site.css").write_text("body { margin: 0; }")
    return site


class TestBucketProvisioner:
    """Test the bucket pipeline against a fake provider."""

    def test_steps_run_in_order(self, fake_provider, build_dir):
        """Test the create, open, policy, sync, website sequence."""
        result = BucketProvisioner(fake_provider, "example.com", "my-site", str(build_dir)).run()

        assert fake_provider.calls == [
            "create_bucket",
            "put_public_access_block",
            "put_bucket_policy",
            "list_objects",
            "upload_file",
            "upload_file",
            "upload_file",
            "put_bucket_website",
        ]
        assert result.website_endpoint == "http://my-site.s3-website-eu-west-1.amazonaws.com"
        assert sorted(result.sync.uploaded) == ["css/site.css", "error.html", "index.html"]

    def test_policy_and_website_configuration(self, fake_provider, build_dir):
        """Test the policy and website documents sent to the provider."""
        BucketProvisioner(fake_provider, "example.com", "my-site", str(build_dir)).run()

        statement = fake_provider.policies["my-site"]["Statement"][0]
        assert statement["Resource"] == "arn:aws:s3:::my-site/*"
        assert statement["Principal"] == "*"
        assert fake_provider.websites["my-site"] == {
            "IndexDocument": {"Suffix": "index.html"},
            "ErrorDocument": {"Key": "error.html"},
        }

    def test_sync_deletes_remote_only_objects(self, fake_provider, build_dir):
        """Test that objects missing locally are removed from the bucket."""
        fake_provider.objects["stale.html"] = {"Key": "stale.html", "Size": 3, "ETag": '"abc"'}

        result = BucketProvisioner(fake_provider, "example.com", "my-site", str(build_dir)).run()

        assert result.sync.deleted == ["stale.html"]
        assert "stale.html" not in fake_provider.objects
        assert fake_provider.calls.index("delete_objects") < fake_provider.calls.index("put_bucket_website")

    def test_missing_directory(self, fake_provider, tmp_path):
        """Test that a missing build directory fails before any API call."""
        with pytest.raises(PreconditionError, match="does not exist"):
            BucketProvisioner(fake_provider, "example.com", "my-site", str(tmp_path / "nope")).run()

        assert fake_provider.calls == []

    def test_bucket_name_collision_is_fatal(self, fake_provider, build_dir):
        """Test that a taken bucket name aborts the pipeline without retrying."""
        fake_provider.failures["create_bucket"] = ClientError(
            {"Error": {"Code": "BucketAlreadyExists", "Message": "The requested bucket name is not available"}},
            "CreateBucket",
        )

        with pytest.raises(ProviderError) as exc_info:
            BucketProvisioner(fake_provider, "example.com", "my-site", str(build_dir)).run()

        assert exc_info.value.exit_code == 1
        assert fake_provider.calls == ["create_bucket"]

    def test_failure_mid_pipeline_stops(self, fake_provider, build_dir):
        """Test that a failed policy call stops before the sync."""
        fake_provider.failures["put_bucket_policy"] = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}},
            "PutBucketPolicy",
        )

        with pytest.raises(ProviderError):
            BucketProvisioner(fake_provider, "example.com", "my-site", str(build_dir)).run()

        assert fake_provider.calls == ["create_bucket", "put_public_access_block", "put_bucket_policy"]
