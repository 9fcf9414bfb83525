from clinic_insights.services.ai_performance_service import AIPerformanceService
from clinic_insights.services.metrics_service import MetricsService, compute_metrics

__all__ = [
    "AIPerformanceService",
    "MetricsService",
    "compute_metrics",
]
