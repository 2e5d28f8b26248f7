"""Tests for the reflection TTL cache."""

from amaraday.models import ReflectionHabit, ReflectionPayload
from amaraday.reflection_cache import ReflectionCache


class FakeClock:
    def __init__(self):
        self.t = 1000.0

    def __call__(self) -> float:
        return self.t


def _payload(note: str = "calm") -> ReflectionPayload:
    return ReflectionPayload(
        date="2025-10-13", time_of_day="evening", note_text=note,
        habits=[ReflectionHabit(name="Walk", status="done", streak_days=2)],
    )


class TestReflectionCache:
    def test_hit_within_ttl(self):
        clock = FakeClock()
        cache = ReflectionCache(ttl_seconds=60, clock=clock)
        cache.set("k", "text")
        clock.t += 59
        assert cache.get("k") == "text"

    def test_expired_entry_evicted(self):
        clock = FakeClock()
        cache = ReflectionCache(ttl_seconds=60, clock=clock)
        cache.set("k", "text")
        clock.t += 60
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_miss(self):
        assert ReflectionCache(ttl_seconds=60).get("nothing") is None

    def test_clear(self):
        cache = ReflectionCache(ttl_seconds=60)
        cache.set("a", "1")
        cache.set("b", "2")
        cache.clear()
        assert len(cache) == 0
        assert cache.get("a") is None

    def test_write_sweeps_expired_entries(self):
        clock = FakeClock()
        cache = ReflectionCache(ttl_seconds=60, clock=clock)
        for i in range(100):
            cache.set(f"k{i}", "old")
        clock.t += 61
        cache.set("new", "fresh")
        assert len(cache) == 1
        assert cache.get("new") == "fresh"

    def test_write_keeps_live_entries(self):
        clock = FakeClock()
        cache = ReflectionCache(ttl_seconds=60, clock=clock)
        cache.set("old", "1")
        clock.t += 30
        cache.set("new", "2")
        assert len(cache) == 2

    def test_max_entries_drops_oldest(self):
        cache = ReflectionCache(ttl_seconds=60, max_entries=2)
        cache.set("a", "1")
        cache.set("b", "2")
        cache.set("c", "3")
        assert len(cache) == 2
        assert cache.get("a") is None
        assert cache.get("c") == "3"

    def test_rewrite_same_key_does_not_evict(self):
        cache = ReflectionCache(ttl_seconds=60, max_entries=2)
        cache.set("a", "1")
        cache.set("b", "2")
        cache.set("b", "3")
        assert cache.get("a") == "1"
        assert cache.get("b") == "3"

    def test_instances_are_independent(self):
        first = ReflectionCache(ttl_seconds=60)
        second = ReflectionCache(ttl_seconds=60)
        first.set("k", "text")
        assert second.get("k") is None


class TestKeyFor:
    def test_same_payload_same_key(self):
        assert ReflectionCache.key_for(_payload()) == ReflectionCache.key_for(_payload())

    def test_note_changes_key(self):
        assert ReflectionCache.key_for(_payload("calm")) != ReflectionCache.key_for(_payload("tense"))
