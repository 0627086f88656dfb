"""Tests for the synthetic metrics cache: snapshot bounds, TTL gating, series shapes."""

import random

import pytest

from organizeit.clock import iso_from_ms
from organizeit.errors import CorruptRecord, MalformedInput
from organizeit.intelligence.metrics import (
    BASELINE_KEY,
    DASHBOARD_KEY,
    HISTORY_PREFIX,
    MetricsCache,
)


@pytest.fixture
def cache(store, clock, rng):
    return MetricsCache(store, rng=rng, clock=clock)


def _assert_snapshot_bounds(snap):
    assert 95 <= snap["system_health"] <= 100
    assert 99 <= snap["uptime"] <= 100
    assert snap["carbon_footprint"] >= 30
    assert snap["mttd"] >= 5
    assert snap["mttr"] >= 15
    assert snap["alerts_count"] >= 0
    assert isinstance(snap["alerts_count"], int)
    assert isinstance(snap["active_projects"], int)
    assert isinstance(snap["monthly_spend"], int)


# --- Dashboard snapshot ---

class TestDashboard:
    def test_shape(self, cache, clock):
        snap = cache.dashboard()
        _assert_snapshot_bounds(snap)
        assert snap["timestamp"] == iso_from_ms(int(clock() * 1000))
        assert snap["last_updated"] == int(clock() * 1000)

    @pytest.mark.parametrize("seed", range(50))
    def test_bounds_hold_for_any_draw(self, store, clock, seed):
        cache = MetricsCache(store, rng=random.Random(seed), clock=clock)
        _assert_snapshot_bounds(cache.dashboard())

    def test_integer_fields_stay_near_baseline(self, cache):
        snap = cache.dashboard()
        assert 275000 <= snap["monthly_spend"] < 295000
        assert 22 <= snap["active_projects"] <= 25

    def test_cached_within_ttl(self, cache, clock):
        first = cache.dashboard()
        clock.advance(59)
        second = cache.dashboard()
        assert second == first

    def test_recomputed_after_ttl(self, cache, clock):
        first = cache.dashboard()
        clock.advance(61)
        second = cache.dashboard()
        assert second["timestamp"] != first["timestamp"]
        assert second["last_updated"] - first["last_updated"] == 61000

    def test_every_recompute_is_archived(self, cache, store, clock):
        cache.dashboard()
        clock.advance(61)
        cache.dashboard()
        clock.advance(10)
        cache.dashboard()  # cached, not archived again
        assert len(store.list(HISTORY_PREFIX)) == 2

    def test_history_newest_first(self, cache, clock):
        first = cache.dashboard()
        clock.advance(120)
        second = cache.dashboard()
        assert cache.history() == [second, first]
        assert cache.history(limit=1) == [second]

    def test_history_limit_validated(self, cache):
        with pytest.raises(MalformedInput):
            cache.history(limit=0)

    def test_malformed_cached_snapshot_is_recomputed(self, cache, store):
        store.set(DASHBOARD_KEY, {"system_health": "broken"})
        snap = cache.dashboard()
        _assert_snapshot_bounds(snap)
        assert store.get(DASHBOARD_KEY) == snap


# --- Baseline ---

class TestBaseline:
    def test_default_when_unset(self, cache):
        assert cache.baseline()["monthly_spend"] == 285000

    def test_reseed_is_used_on_next_stale_read(self, cache, clock):
        cache.dashboard()
        cache.reseed_baseline({"active_projects": 100})
        clock.advance(61)
        assert 98 <= cache.dashboard()["active_projects"] <= 101

    def test_out_of_range_baseline_is_clamped(self, cache):
        cache.reseed_baseline({"system_health": 50, "uptime": 120, "alerts_count": -10})
        snap = cache.dashboard()
        assert snap["system_health"] == 95
        assert snap["uptime"] == 100
        assert snap["alerts_count"] == 0

    @pytest.mark.parametrize("values", [
        {},
        {"cpu": 10},
        {"uptime": "high"},
        {"uptime": True},
        {"uptime": float("nan")},
    ])
    def test_reseed_rejects_bad_values(self, cache, values):
        with pytest.raises(MalformedInput):
            cache.reseed_baseline(values)

    def test_corrupt_stored_baseline(self, cache, store):
        store.set(BASELINE_KEY, {"uptime": "n/a"})
        with pytest.raises(CorruptRecord):
            cache.baseline()


# --- Performance series ---

class TestPerformance:
    def test_two_hours_gives_three_buckets(self, cache, clock):
        result = cache.performance(hours=2)
        assert result["hours"] == 2
        data = result["data"]
        assert len(data) == 3
        now = int(clock() * 1000)
        assert [b["timestamp"] for b in data] == [
            iso_from_ms(now - 2 * 3600_000),
            iso_from_ms(now - 3600_000),
            iso_from_ms(now),
        ]
        for bucket in data:
            assert 20 <= bucket["cpu"] <= 95
            assert 30 <= bucket["memory"] <= 90
            assert 10 <= bucket["disk"] <= 80
            assert 5 <= bucket["network"] <= 70
            assert bucket["time"].endswith(":00")

    def test_default_is_24_hours(self, cache):
        assert len(cache.performance()["data"]) == 25

    def test_zero_hours(self, cache):
        assert len(cache.performance(hours=0)["data"]) == 1

    def test_archived_write_only(self, cache, store, clock):
        cache.performance(hours=1)
        assert store.list("performance:1h:") != []

    def test_never_cached(self, cache):
        assert cache.performance(hours=3) != cache.performance(hours=3)

    @pytest.mark.parametrize("hours", [-1, 169, "24", 2.5, True])
    def test_invalid_hours(self, cache, hours):
        with pytest.raises(MalformedInput):
            cache.performance(hours=hours)


# --- Cost series ---

class TestCosts:
    def test_six_months_ending_now(self, cache):
        result = cache.costs()
        assert result["period"] == "6m"
        months = [row["month"] for row in result["data"]]
        assert months == ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]

    def test_total_is_sum_of_unnoised_baselines(self, cache):
        rows = cache.costs()["data"]
        assert rows[0]["total"] == 125000 + 87000 + 45000
        assert rows[-1]["total"] == 125000 + 87000 + 45000 + 5 * (2000 + 1500 + 1000)

    def test_provider_noise_is_bounded(self, cache):
        for step, row in enumerate(cache.costs()["data"]):
            assert abs(row["aws"] - (125000 + step * 2000)) <= 5000
            assert abs(row["azure"] - (87000 + step * 1500)) <= 4000
            assert abs(row["gcp"] - (45000 + step * 1000)) <= 2500

    def test_year_boundary(self, store, rng):
        # 2025-02-10: series starts in September of the previous year
        cache = MetricsCache(store, rng=rng, clock=lambda: 1_739_188_800.0)
        rows = cache.costs()["data"]
        assert [r["month"] for r in rows] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]
        assert rows[0]["date"].startswith("2024-09-01")

    def test_archived(self, cache, store):
        cache.costs("3m")
        assert len(store.list("finops:costs:3m:")) == 1

    @pytest.mark.parametrize("period", ["", "six", "6x", "m6", "1234d", None])
    def test_invalid_period(self, cache, period):
        with pytest.raises(MalformedInput):
            cache.costs(period)
