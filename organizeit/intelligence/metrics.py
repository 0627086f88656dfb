"""Synthetic dashboard telemetry.

Three producers, all simulated:
- dashboard(): a snapshot cached under metrics:dashboard:current and
  recomputed from the stored baseline once it is older than the TTL.
  Every recompute is also archived under metrics:historical:<ms>.
- performance(): hourly cpu/memory/disk/network buckets, regenerated on
  every call. Archived write-only, never read back.
- costs(): six calendar months of per-provider spend with linear growth.

Randomness and time are injected so tests can pin both.
"""

from __future__ import annotations

import math
import random
import re
import time
from datetime import datetime, timezone

from organizeit.clock import HOUR_MS, Clock, iso_from_ms, ms_from_iso, now_ms
from organizeit.errors import CorruptRecord, MalformedInput
from organizeit.log import logger
from organizeit.models import MetricSnapshot, load_record
from organizeit.store.kv import KeyValueStore

DASHBOARD_KEY = "metrics:dashboard:current"
HISTORY_PREFIX = "metrics:historical:"
BASELINE_KEY = "system:base_metrics"

DEFAULT_BASELINE: dict[str, float] = {
    "system_health": 98.7,
    "monthly_spend": 285000,
    "carbon_footprint": 42.3,
    "active_projects": 24,
    "uptime": 99.87,
    "mttd": 8.2,
    "mttr": 24.5,
    "alerts_count": 3,
}

# field -> (full jitter width, lower bound, upper bound, integer)
# Jitter is symmetric: value + (u - 0.5) * width for u in [0, 1).
_SNAPSHOT_FIELDS: dict[str, tuple[float, float | None, float | None, bool]] = {
    "system_health": (0.8, 95, 100, False),
    "monthly_spend": (20000, None, None, True),
    "carbon_footprint": (4, 30, None, False),
    "active_projects": (4, None, None, True),
    "uptime": (0.3, 99, 100, False),
    "mttd": (2, 5, None, False),
    "mttr": (8, 15, None, False),
    "alerts_count": (3, 0, None, True),
}

# metric -> (base load multiplier, full noise width, lower bound, upper bound)
_PERFORMANCE_METRICS: dict[str, tuple[float, float, float, float]] = {
    "cpu": (1.0, 30, 20, 95),
    "memory": (1.0, 25, 30, 90),
    "disk": (0.6, 20, 10, 80),
    "network": (0.4, 15, 5, 70),
}

_BUSINESS_HOURS = range(9, 18)  # 09:00-17:59 local
_BUSINESS_LOAD = 70
_OFF_HOURS_LOAD = 40

# provider -> (base cost in oldest month, monthly growth, full noise width)
_COST_PROVIDERS: dict[str, tuple[int, int, int]] = {
    "aws": (125000, 2000, 10000),
    "azure": (87000, 1500, 8000),
    "gcp": (45000, 1000, 5000),
}
_COST_MONTHS = 6

_PERIOD_RE = re.compile(r"^\d{1,3}[dwmy]$")


def _clamp(value: float, low: float | None, high: float | None) -> float:
    if low is not None:
        value = max(low, value)
    if high is not None:
        value = min(high, value)
    return value


class MetricsCache:
    """Time-windowed synthetic metrics over a key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        ttl_seconds: float = 60,
        default_baseline: dict | None = None,
        max_performance_hours: int = 168,
        rng: random.Random | None = None,
        clock: Clock = time.time,
    ) -> None:
        self._store = store
        self._ttl_ms = int(ttl_seconds * 1000)
        self._default_baseline = dict(default_baseline or DEFAULT_BASELINE)
        self._max_hours = max_performance_hours
        self._rng = rng or random.Random()
        self._clock = clock

    # ------------------------------------------------------------------
    # Dashboard snapshot
    # ------------------------------------------------------------------

    def dashboard(self) -> dict:
        """Return the current snapshot, recomputing it if stale or absent."""
        current = now_ms(self._clock)
        cached = self._load_cached()
        if cached is not None and not self._is_stale(cached, current):
            return cached

        snapshot = self._compute_snapshot(current)
        self._store.set(DASHBOARD_KEY, snapshot)
        self._store.set(f"{HISTORY_PREFIX}{current}", snapshot)
        logger.debug("Dashboard snapshot recomputed at %d", current)
        return snapshot

    def _load_cached(self) -> dict | None:
        value = self._store.get(DASHBOARD_KEY)
        if value is None:
            return None
        try:
            return load_record(MetricSnapshot, DASHBOARD_KEY, value)
        except CorruptRecord:
            logger.warning("Cached dashboard snapshot is malformed, recomputing", exc_info=True)
            return None

    def _is_stale(self, snapshot: dict, current: int) -> bool:
        try:
            taken = ms_from_iso(snapshot["timestamp"])
        except (KeyError, TypeError, ValueError):
            logger.warning("Cached dashboard snapshot has an unreadable timestamp, recomputing")
            return True
        return current - taken > self._ttl_ms

    def baseline(self) -> dict:
        """Stored baseline merged over the default one."""
        stored = self._store.get(BASELINE_KEY)
        if stored is None:
            return dict(self._default_baseline)
        if not isinstance(stored, dict):
            raise CorruptRecord(f"Stored value at {BASELINE_KEY!r} is not an object")
        merged = dict(self._default_baseline)
        for name in _SNAPSHOT_FIELDS:
            if name in stored:
                value = stored[name]
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise CorruptRecord(f"Baseline field {name!r} is not numeric")
                merged[name] = value
        return merged

    def reseed_baseline(self, values: dict) -> dict:
        """Explicitly overwrite the stored baseline. The next stale read uses it."""
        if not isinstance(values, dict) or not values:
            raise MalformedInput("Baseline must be a non-empty object")
        unknown = sorted(set(values) - set(_SNAPSHOT_FIELDS))
        if unknown:
            raise MalformedInput(f"Unknown baseline fields: {', '.join(unknown)}")
        for name, value in values.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise MalformedInput(f"Baseline field {name!r} must be a finite number")
        merged = dict(self._default_baseline)
        merged.update(values)
        self._store.set(BASELINE_KEY, merged)
        logger.info("Baseline metrics reseeded: %s", sorted(values))
        return merged

    def _compute_snapshot(self, current: int) -> dict:
        base = self.baseline()
        snapshot: dict = {}
        for name, (width, low, high, integer) in _SNAPSHOT_FIELDS.items():
            delta = (self._rng.random() - 0.5) * width
            if integer:
                value = base[name] + math.floor(delta)
                snapshot[name] = int(_clamp(value, low, high))
            else:
                snapshot[name] = round(_clamp(base[name] + delta, low, high), 2)
        snapshot["timestamp"] = iso_from_ms(current)
        snapshot["last_updated"] = current
        return snapshot

    def history(self, limit: int = 50) -> list[dict]:
        """Archived dashboard snapshots, newest first."""
        if limit < 1:
            raise MalformedInput("limit must be at least 1")
        entries = self._store.list(HISTORY_PREFIX)
        return [value for _key, value in reversed(entries)][:limit]

    # ------------------------------------------------------------------
    # Performance series
    # ------------------------------------------------------------------

    def performance(self, hours: int = 24) -> dict:
        """hours+1 hourly buckets ending now, oldest first. Never cached."""
        if isinstance(hours, bool) or not isinstance(hours, int) or hours < 0 or hours > self._max_hours:
            raise MalformedInput(f"hours must be an integer between 0 and {self._max_hours}")

        current = now_ms(self._clock)
        buckets = []
        for i in range(hours, -1, -1):
            ts = current - i * HOUR_MS
            hour = datetime.fromtimestamp(ts / 1000).hour
            base_load = _BUSINESS_LOAD if hour in _BUSINESS_HOURS else _OFF_HOURS_LOAD

            bucket: dict = {
                "timestamp": iso_from_ms(ts),
                "time": f"{hour:02d}:00",
            }
            for metric, (mult, width, low, high) in _PERFORMANCE_METRICS.items():
                noise = (self._rng.random() - 0.5) * width
                bucket[metric] = round(_clamp(base_load * mult + noise, low, high), 2)
            buckets.append(bucket)

        self._store.set(f"performance:{hours}h:{current}", buckets)
        return {"data": buckets, "hours": hours}

    # ------------------------------------------------------------------
    # Cost series
    # ------------------------------------------------------------------

    def costs(self, period: str = "6m") -> dict:
        """Six months of per-provider cost ending at the current month.

        `total` is the sum of the un-noised baselines, not of the noised
        per-provider figures shown alongside it.
        """
        if not isinstance(period, str) or not _PERIOD_RE.match(period):
            raise MalformedInput("period must look like '6m', '30d', '12w' or '1y'")

        current = now_ms(self._clock)
        today = datetime.fromtimestamp(current / 1000, tz=timezone.utc)
        series = []
        for i in range(_COST_MONTHS - 1, -1, -1):
            year, month = today.year, today.month - i
            while month < 1:
                month += 12
                year -= 1
            first = datetime(year, month, 1, tzinfo=timezone.utc)
            step = _COST_MONTHS - 1 - i

            row: dict = {"month": first.strftime("%b"), "date": first.isoformat()}
            total = 0
            for provider, (base, growth, width) in _COST_PROVIDERS.items():
                baseline = base + step * growth
                row[provider] = baseline + math.floor((self._rng.random() - 0.5) * width)
                total += baseline
            row["total"] = total
            series.append(row)

        self._store.set(f"finops:costs:{period}:{current}", series)
        return {"data": series, "period": period}
