"""Tests for ExistenceCache."""

from pathlib import Path

from lcovbridge.reconcile.existence import ExistenceCache


class TestExistenceCache:
    def test_first_call_probes(self) -> None:
        calls: list[str] = []
        cache = ExistenceCache(lambda p: calls.append(p) or p == "/a")
        assert cache.exists("/a") is True
        assert cache.exists("/b") is False
        assert calls == ["/a", "/b"]
        assert cache.probes == 2

    def test_repeat_calls_are_memoized(self) -> None:
        calls: list[str] = []
        cache = ExistenceCache(lambda p: calls.append(p) or True)
        for _ in range(3):
            cache.exists("/a")
        assert calls == ["/a"]
        assert cache.probes == 1

    def test_negative_results_are_memoized(self) -> None:
        calls: list[str] = []
        cache = ExistenceCache(lambda p: calls.append(p) or False)
        cache.exists("/missing")
        cache.exists("/missing")
        assert calls == ["/missing"]

    def test_callable(self) -> None:
        cache = ExistenceCache(lambda p: p.endswith(".ts"))
        assert cache("/x.ts") is True

    def test_default_probe_hits_filesystem(self, tmp_path: Path) -> None:
        present = tmp_path / "present.txt"
        present.write_text("x")
        cache = ExistenceCache()
        assert cache.exists(str(present)) is True
        assert cache.exists(str(tmp_path / "absent.txt")) is False

    def test_stale_within_instance(self, tmp_path: Path) -> None:
        """A file created after the first check stays unknown to the same cache."""
        target = tmp_path / "late.txt"
        cache = ExistenceCache()
        assert cache.exists(str(target)) is False
        target.write_text("x")
        assert cache.exists(str(target)) is False
        assert ExistenceCache().exists(str(target)) is True
