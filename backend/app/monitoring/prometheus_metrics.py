"""
Prometheus metrics module for LessonHub.

Exposes HTTP, service-operation and inventory counters in the Prometheus
exposition format. Service metrics are fed by the @measure_operation
decorator on BaseService subclasses.
"""

from threading import Lock
from time import monotonic
from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Custom registry so repeated app construction in tests never collides
REGISTRY = CollectorRegistry()

http_request_duration_seconds = Histogram(
    "lessonhub_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_total = Counter(
    "lessonhub_http_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
)

service_operation_duration_seconds = Histogram(
    "lessonhub_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "lessonhub_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "lessonhub_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

spaces_adjustments_total = Counter(
    "lessonhub_spaces_adjustments_total",
    "Lesson capacity adjustments by outcome",
    ["outcome"],  # success | insufficient | not_found | conflict
    registry=REGISTRY,
)

spaces_update_retries_total = Counter(
    "lessonhub_spaces_update_retries_total",
    "Conditional capacity updates that had to be retried",
    registry=REGISTRY,
)

orders_created_total = Counter(
    "lessonhub_orders_created_total",
    "Total number of orders accepted",
    registry=REGISTRY,
)

class PrometheusMetrics:
    """Manages Prometheus metrics collection and exposure."""

    _cache_lock: Lock = Lock()
    _cache_payload: Optional[bytes] = None
    _cache_ts: Optional[float] = None
    _cache_ttl_seconds: float = 1.0

    @staticmethod
    def record_http_request(method: str, endpoint: str, duration: float, status_code: int) -> None:
        """Record HTTP request metrics."""
        labels = {"method": method, "endpoint": endpoint, "status_code": str(status_code)}

        http_request_duration_seconds.labels(**labels).observe(duration)
        http_requests_total.labels(**labels).inc()
        PrometheusMetrics._invalidate_cache()

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'InventoryService')
            operation: Operation/method name (e.g., 'adjust_spaces')
            duration: Operation duration in seconds
            status: 'success' or 'error'
            error_type: Exception class name when status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()

        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

        PrometheusMetrics._invalidate_cache()

    @staticmethod
    def record_spaces_adjustment(outcome: str, retries: int = 0) -> None:
        spaces_adjustments_total.labels(outcome=outcome).inc()
        if retries:
            spaces_update_retries_total.inc(retries)
        PrometheusMetrics._invalidate_cache()

    @staticmethod
    def record_order_created() -> None:
        orders_created_total.inc()
        PrometheusMetrics._invalidate_cache()

    @staticmethod
    def get_metrics() -> bytes:
        """
        Generate Prometheus metrics in exposition format.

        Returns:
            Metrics data in Prometheus text format
        """
        now = monotonic()
        payload = PrometheusMetrics._cache_payload
        ts = PrometheusMetrics._cache_ts

        if payload is not None and ts is not None and (now - ts) <= PrometheusMetrics._cache_ttl_seconds:
            return payload

        with PrometheusMetrics._cache_lock:
            payload = generate_latest(REGISTRY)
            PrometheusMetrics._cache_payload = payload
            PrometheusMetrics._cache_ts = monotonic()
        return payload

    @staticmethod
    def get_content_type() -> str:
        return CONTENT_TYPE_LATEST

    @staticmethod
    def _invalidate_cache() -> None:
        with PrometheusMetrics._cache_lock:
            PrometheusMetrics._cache_payload = None
            PrometheusMetrics._cache_ts = None

prometheus_metrics = PrometheusMetrics()
