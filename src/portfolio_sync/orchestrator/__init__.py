"""Refresh orchestration — update cycle and its scheduler."""

from portfolio_sync.orchestrator.scheduler import RefreshScheduler, Trigger
from portfolio_sync.orchestrator.updater import PortfolioUpdater, RefreshResult

__all__ = ["PortfolioUpdater", "RefreshResult", "RefreshScheduler", "Trigger"]
