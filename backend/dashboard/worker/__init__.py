"""Offline worker: response caching, sync queue and local reminders."""

from dashboard.worker.service_worker import BackgroundSyncUnavailable, ServiceWorker

__all__ = ["BackgroundSyncUnavailable", "ServiceWorker"]
