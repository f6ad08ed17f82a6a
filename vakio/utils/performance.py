"""
Performance monitoring utilities for the Vakio application
"""

import time

from flask import current_app, g, request

from vakio.utils.logging_config import get_logger

logger = get_logger(__name__)


class PerformanceMonitor:
    """Context manager for monitoring performance of code blocks"""

    def __init__(self, operation_name, log_threshold=0.1):
        self.operation_name = operation_name
        self.log_threshold = log_threshold
        self.start_time = None
        self.duration = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.time() - self.start_time

        if self.duration > self.log_threshold:
            if exc_type:
                logger.error(
                    f"Operation '{self.operation_name}' failed after {self.duration:.3f}s: {exc_val}"
                )
            else:
                logger.info(
                    f"Operation '{self.operation_name}' completed in {self.duration:.3f}s"
                )

        # Request-level aggregation
        metrics = g.setdefault("performance_metrics", [])
        metrics.append(
            {
                "operation": self.operation_name,
                "duration": self.duration,
                "success": exc_type is None,
            }
        )


def track_request_performance():
    """Track overall request performance"""
    g.request_start_time = time.time()


def log_request_performance():
    """Log request performance summary"""
    if "request_start_time" not in g:
        return

    total_duration = time.time() - g.request_start_time

    threshold = current_app.config.get("SLOW_REQUEST_THRESHOLD", 2.0)
    if total_duration > threshold:
        logger.warning(
            f"Slow request: {request.method} {request.path} "
            f"took {total_duration:.2f}s (threshold: {threshold}s)"
        )

        for metric in g.get("performance_metrics", []):
            logger.info(
                f"  - {metric['operation']}: {metric['duration']:.3f}s "
                f"({'success' if metric['success'] else 'failed'})"
            )
