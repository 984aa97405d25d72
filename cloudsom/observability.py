"""
Observability infrastructure for the SOM engine
Provides structured logging, metrics and operation tracing
"""

import logging
import time
import uuid
import structlog
from contextlib import contextmanager
from prometheus_client import Counter, Histogram, Gauge, generate_latest


# Prometheus Metrics
TRAINING_STEPS = Counter(
    "cloudsom_training_steps_total", "Total SOM training steps completed"
)

RUN_DURATION = Histogram(
    "cloudsom_run_duration_seconds",
    "Duration of SOM training batches in seconds",
    ["n_neurons"],
)

RESETS_TOTAL = Counter("cloudsom_resets_total", "Total number of trainer resets")

LEARNING_FACTOR = Gauge(
    "cloudsom_learning_factor", "Learning factor after the most recent step"
)

NEIGHBOR_SIZE = Gauge(
    "cloudsom_neighbor_size", "Neighbour size after the most recent step"
)

OPERATIONS_TOTAL = Counter(
    "cloudsom_operations_total",
    "Traced operations by outcome",
    ["operation", "status"],
)


class CorrelationIDProcessor:
    """Add the correlation ID of the enclosing trace_operation to log entries"""

    def __call__(self, logger, method_name, event_dict):
        if "correlation_id" not in event_dict:
            bound = structlog.contextvars.get_contextvars()
            event_dict["correlation_id"] = bound.get("correlation_id", "unknown")
        return event_dict


def setup_logging(log_level: str = "INFO", json_format: bool = True) -> None:
    """Configure structured logging with structlog"""

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.StackInfoRenderer(),
        CorrelationIDProcessor(),
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
    )


def get_correlation_id() -> str:
    """Generate a new correlation ID"""
    return str(uuid.uuid4())


@contextmanager
def trace_operation(operation_name: str, **extra_context):
    """Context manager for tracing operations with metrics and logging"""
    logger = structlog.get_logger()
    correlation_id = get_correlation_id()
    start_time = time.time()

    # Every log line emitted inside the block carries this operation's id
    with structlog.contextvars.bound_contextvars(correlation_id=correlation_id):
        logger.info("Operation started", operation=operation_name, **extra_context)

        try:
            yield correlation_id
            duration = time.time() - start_time
            OPERATIONS_TOTAL.labels(operation=operation_name, status="success").inc()
            logger.info(
                "Operation completed",
                operation=operation_name,
                duration_seconds=duration,
                **extra_context,
            )
        except Exception as e:
            duration = time.time() - start_time
            OPERATIONS_TOTAL.labels(operation=operation_name, status="error").inc()
            logger.error(
                "Operation failed",
                operation=operation_name,
                duration_seconds=duration,
                error=str(e),
                error_type=type(e).__name__,
                **extra_context,
            )
            raise


def get_metrics() -> bytes:
    """Get Prometheus metrics in text format"""
    return generate_latest()


def log_step_metrics(learning_factor: float, neighbor_size: float):
    """Record a single training step and the decay state it left behind"""
    TRAINING_STEPS.inc()
    LEARNING_FACTOR.set(learning_factor)
    NEIGHBOR_SIZE.set(neighbor_size)


def log_run_metrics(n_neurons: int, duration: float):
    """Record the wall time of a completed training batch"""
    RUN_DURATION.labels(n_neurons=str(n_neurons)).observe(duration)


def log_reset_metrics():
    """Record a trainer reset"""
    RESETS_TOTAL.inc()
