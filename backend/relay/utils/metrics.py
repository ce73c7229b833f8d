"""
Prometheus metrics definitions.
All metrics are registered here and can be imported by other modules.
"""
from prometheus_client import Counter, Histogram

# HTTP request metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'path', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'path'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Error metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['error_type']
)

# Upload metrics
files_uploaded_total = Counter(
    'files_uploaded_total',
    'Total files uploaded',
    ['url_type']
)

upload_size_bytes = Histogram(
    'upload_size_bytes',
    'Size of uploaded files in bytes',
    buckets=[1024, 10240, 102400, 1048576, 5242880, 10485760, 52428800]
)

acl_results_total = Counter(
    'acl_results_total',
    'Outcomes of public-read ACL attempts',
    ['result']
)

# Share metrics
share_links_resolved_total = Counter(
    'share_links_resolved_total',
    'Total share link lookups',
    ['result']
)

# Storage metrics
storage_errors_total = Counter(
    'storage_errors_total',
    'Total failed storage operations',
    ['operation']
)
