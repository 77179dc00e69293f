"""Detection delivery channels for the ModSentinel auditor."""

from auditor.channels.base import AlertChannel
from auditor.channels.log_channel import LogChannel
from auditor.channels.webhook_channel import WebhookChannel

__all__ = [
    "AlertChannel",
    "LogChannel",
    "WebhookChannel",
]
