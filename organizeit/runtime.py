"""Process-wide wiring: one store, every service built on top of it."""

from __future__ import annotations

import threading

from organizeit.config.loader import get_config, get_store_config
from organizeit.intelligence.alerts import AlertLifecycle
from organizeit.intelligence.chat import ChatIntentRouter
from organizeit.intelligence.esg import ESGService
from organizeit.intelligence.finops import FinOpsService
from organizeit.intelligence.identity import IdentityService
from organizeit.intelligence.insights import InsightsService
from organizeit.intelligence.metrics import MetricsCache
from organizeit.intelligence.notifications import NotificationService
from organizeit.intelligence.projects import ProjectService
from organizeit.intelligence.service_health import ServiceHealthBoard
from organizeit.log import logger
from organizeit.state import COLLECTIONS, open_collection
from organizeit.store import KeyValueStore, create_store


class Runtime:
    """Singleton holding the store and the services that share it."""

    _instance = None
    _lock = threading.Lock()

    def __init__(self, store: KeyValueStore | None = None) -> None:
        config = get_config()
        if store is None:
            store_cfg = get_store_config()
            store = create_store(store_cfg.get("backend", "sqlite"), store_cfg.get("db_path") or None)
        self.store = store

        metrics_cfg = config.get("metrics", {})
        chat_cfg = config.get("chat", {})
        audit_cfg = config.get("audit", {})

        self.metrics = MetricsCache(
            store,
            ttl_seconds=metrics_cfg.get("dashboard_ttl_seconds", 60),
            default_baseline=metrics_cfg.get("baseline"),
            max_performance_hours=metrics_cfg.get("max_performance_hours", 168),
        )
        self.alerts = AlertLifecycle(store)
        self.notifications = NotificationService(store)
        self.projects = ProjectService(store)
        self.services = ServiceHealthBoard(store)
        self.chat = ChatIntentRouter(store, max_message_length=chat_cfg.get("max_message_length", 2000))
        self.chat_history_limit = chat_cfg.get("history_limit", 100)
        self.finops = FinOpsService(store, self.metrics)
        self.esg = ESGService(store)
        self.insights = InsightsService(store)
        self.identity = IdentityService(
            store,
            default_audit_limit=audit_cfg.get("default_limit", 50),
            max_audit_limit=audit_cfg.get("max_limit", 1000),
        )

    @classmethod
    def get(cls) -> "Runtime":
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._instance = None

    def warm(self) -> list[str]:
        """Seed every collection and the dashboard snapshot, best-effort.

        Returns the names that were warmed successfully. Failures are
        logged and skipped; warming never raises.
        """
        warmed = []
        for name in COLLECTIONS:
            try:
                open_collection(name, self.store).read()
            except Exception:
                logger.debug("Failed to warm collection %s", name, exc_info=True)
            else:
                warmed.append(name)
        try:
            self.metrics.dashboard()
        except Exception:
            logger.debug("Failed to warm dashboard snapshot", exc_info=True)
        else:
            warmed.append("dashboard")
        logger.info("Warmed %d of %d stores", len(warmed), len(COLLECTIONS) + 1)
        return warmed
