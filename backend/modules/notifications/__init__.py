"""
Notifications module.

Marketing-contact sync and transactional email through Brevo.

Public API:
- INotificationService: Interface for outbound notifications
"""

from .interfaces import INotificationService

__all__ = [
    "INotificationService",
]
