"""Provision S3 static websites and CloudFront distributions on AWS."""

__version__ = "0.1.0"
