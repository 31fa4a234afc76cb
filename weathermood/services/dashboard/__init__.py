from __future__ import annotations

from weathermood.services.dashboard.coordinator import DashboardCoordinator
from weathermood.services.dashboard.view import article_keys, build_view, derive

__all__ = ["DashboardCoordinator", "article_keys", "build_view", "derive"]
