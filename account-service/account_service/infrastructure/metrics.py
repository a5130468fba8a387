from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# sign-up / log-in outcomes, labelled by the result status
account_operations_total = Counter(
    'account_operations_total',
    'Account provisioning operations',
    ['operation', 'status']
)

profiles_created_total = Counter(
    'profiles_created_total',
    'Profile rows created on first log-in',
    ['role']
)

def metrics_endpoint():
    """Endpoint для Prometheus метрик"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
