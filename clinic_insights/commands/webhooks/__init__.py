"""Webhook command handlers."""

from clinic_insights.commands.webhooks.ai_performance_command import (
    AIPerformanceWebhookCommand,
)

__all__ = ["AIPerformanceWebhookCommand"]
