from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi.responses import Response

# Verdict engine metrics
verdict_calculations = Counter(
    "breaktool_verdict_calculations_total",
    "Total tool verdict calculations",
    ["verdict"],  # keep | try | stop | insufficient_data
)

verdict_calculation_duration = Histogram(
    "breaktool_verdict_calculation_duration_seconds",
    "Time to load reviews, score and persist one tool verdict",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# Verdict refresh worker
verdict_refresh_runs = Counter(
    "breaktool_verdict_refresh_runs_total",
    "Verdict refresh cycles",
    ["status"],  # completed | partial | error
)

# HTTP request metrics (from middleware)
http_requests = Counter(
    "breaktool_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status_code"],
)

http_request_duration = Histogram(
    "breaktool_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "path"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


async def metrics_endpoint():
    """FastAPI endpoint handler that returns Prometheus metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
