from __future__ import annotations

from weathermood.main import open_session
from weathermood.services.dashboard.coordinator import DashboardCoordinator

__all__ = ["DashboardCoordinator", "open_session"]

__version__ = "0.1.0"
