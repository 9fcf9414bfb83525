from clinic_insights.models.ai_performance import AIPerformance

__all__ = [
    "AIPerformance",
]
