"""Notifications package."""

from finance_dashboard.notifications.center import NotificationCenter

__all__ = ["NotificationCenter"]
