"""Constants for the static site deployer."""

# Pipelines
PIPELINE_BUCKET = "bucket"
PIPELINE_CDN = "cdn"

# Website hosting
INDEX_DOCUMENT = "index.html"
ERROR_DOCUMENT = "error.html"
DEFAULT_ROOT_OBJECT = INDEX_DOCUMENT

# Regions
DEFAULT_REGION = "us-east-1"
# CloudFront only accepts viewer certificates issued in us-east-1
ACM_REGION = "us-east-1"

# Bucket policy
PUBLIC_READ_SID = "PublicReadGetObject"
POLICY_VERSION = "2012-10-17"

# DNS
VALIDATION_RECORD_TTL = 300
HOSTED_ZONE_PREFIX = "/hostedzone/"
# Global hosted zone id for every CloudFront distribution
CLOUDFRONT_HOSTED_ZONE_ID = "Z2FDTNDATAQYW2"

# Cache behavior
CACHE_MIN_TTL = 0
CACHE_DEFAULT_TTL = 86400
CACHE_MAX_TTL = 31536000
ALLOWED_METHODS = ["GET", "HEAD"]
VIEWER_PROTOCOL_POLICY = "redirect-to-https"
MINIMUM_PROTOCOL_VERSION = "TLSv1.2_2019"
SSL_SUPPORT_METHOD = "sni-only"
PRICE_CLASS = "PriceClass_All"
HTTP_VERSION = "http2"

# Outputs
DIST_OUTPUT_FILE = "create-dist-output.json"

# Polling defaults (seconds)
CERT_POLL_INTERVAL = 10.0
CERT_POLL_BACKOFF = 1.0
CERT_POLL_MAX_INTERVAL = 60.0
CERT_WAIT_TIMEOUT = 3600.0
VALIDATION_SETTLE_DELAY = 5.0
VALIDATION_POLL_INTERVAL = 5.0
VALIDATION_TIMEOUT = 120.0

# S3 batch delete limit
DELETE_BATCH_SIZE = 1000

# Step names
STEP_PREFLIGHT = "preflight"
STEP_CREATE_BUCKET = "create_bucket"
STEP_PUBLIC_ACCESS = "disable_public_access_block"
STEP_BUCKET_POLICY = "put_public_read_policy"
STEP_SYNC = "sync_directory"
STEP_WEBSITE = "enable_website_hosting"
STEP_HOSTED_ZONE = "lookup_hosted_zone"
STEP_REQUEST_CERT = "request_certificate"
STEP_VALIDATION_RECORD = "fetch_validation_record"
STEP_UPSERT_VALIDATION = "upsert_validation_record"
STEP_WAIT_ISSUED = "wait_certificate_issued"
STEP_CREATE_DISTRIBUTION = "create_distribution"
STEP_CLOUDFRONT_ZONE = "resolve_cloudfront_zone"
STEP_UPSERT_ALIAS = "upsert_alias_record"

# Exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130
