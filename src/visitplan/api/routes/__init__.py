"""Route group exports."""

from . import drafts, health, notifications, plans, reports, routes, sites

__all__ = ["plans", "drafts", "routes", "sites", "reports", "notifications", "health"]
