"""
Shared metrics configuration for the CAS ticket validation service.
"""

from typing import Dict, Any, Optional
import time
import threading
from contextlib import contextmanager

from prometheus_client import Counter, Histogram, CollectorRegistry


class MetricsCollector:
    """Centralized metrics collector for the validation service.

    Each collector owns its registry so several collectors (one per test,
    for instance) never clash on metric names.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up ticket validation metrics."""
        self._metrics["saml_validations_total"] = Counter(
            "saml_validations_total",
            "Total SAML ticket validations",
            ["outcome"],
            registry=self.registry
        )

        self._metrics["saml_validation_duration_seconds"] = Histogram(
            "saml_validation_duration_seconds",
            "SAML validation round trip duration in seconds",
            registry=self.registry
        )

    def record_validation(self, outcome: str):
        """Record a validation outcome: success, failure or error."""
        with self._lock:
            self._metrics["saml_validations_total"].labels(outcome=outcome).inc()

    @contextmanager
    def time_validation(self):
        """Context manager to time a validation round trip."""
        start_time = time.time()
        try:
            yield
        finally:
            self._metrics["saml_validation_duration_seconds"].observe(time.time() - start_time)

    def sample_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> float:
        """Current value of a sample, 0.0 when it was never recorded."""
        value = self.registry.get_sample_value(name, labels or {})
        return value or 0.0
