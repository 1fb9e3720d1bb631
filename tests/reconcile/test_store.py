"""Tests for RecordStore: handles, identity lookups and session resets."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from lcovbridge.coverage.models import LcovRecord
from lcovbridge.reconcile.resolver import FileIdentity
from lcovbridge.reconcile.store import Ratio, RecordStore, SummaryHandle

MakeRecord = Callable[..., LcovRecord]


@pytest.fixture
def store() -> RecordStore:
    return RecordStore()


class TestPut:
    def test_handle_carries_ratios(self, store: RecordStore, make_record: MakeRecord) -> None:
        record = make_record(
            "src/a.ts",
            lines={1: 1, 2: 0},
            functions=[("f", 1, 1)],
            branches=[(2, 0, 0, 0), (2, 0, 1, 3)],
        )
        handle = store.put(FileIdentity("/ws/src/a.ts"), record)

        assert handle.statements == Ratio(1, 2)
        assert handle.declarations == Ratio(1, 1)
        assert handle.branches == Ratio(1, 2)
        assert handle.identity == FileIdentity("/ws/src/a.ts")

    def test_no_branch_or_function_ratio_when_absent(
        self, store: RecordStore, make_record: MakeRecord
    ) -> None:
        handle = store.put(FileIdentity("/ws/a.ts"), make_record("a.ts", lines={1: 1}))
        assert handle.branches is None
        assert handle.declarations is None

    def test_keys_are_unique(self, store: RecordStore, make_record: MakeRecord) -> None:
        h1 = store.put(FileIdentity("/ws/a.ts"), make_record("a.ts"))
        h2 = store.put(FileIdentity("/ws/b.ts"), make_record("b.ts"))
        assert h1.key != h2.key

    def test_same_identity_last_write_wins(
        self, store: RecordStore, make_record: MakeRecord
    ) -> None:
        identity = FileIdentity("/ws/a.ts")
        first = make_record("a.ts", lines={1: 0})
        second = make_record("./a.ts", lines={1: 5})

        old = store.put(identity, first)
        new = store.put(identity, second)

        assert store.lookup_by_identity(identity) is second
        assert store.lookup_by_handle(new) is second
        assert store.lookup_by_handle(old) is None
        assert store.handles() == [new]
        assert store.records() == [second]
        assert len(store) == 1


class TestLookupByHandle:
    def test_same_record_object(self, store: RecordStore, make_record: MakeRecord) -> None:
        identity = FileIdentity("/ws/a.ts")
        record = make_record("a.ts", lines={1: 1})
        handle = store.put(identity, record)

        assert store.lookup_by_identity(identity) is record
        assert store.lookup_by_handle(handle) is record

    def test_handle_without_path_information(
        self, store: RecordStore, make_record: MakeRecord
    ) -> None:
        """Only the key matters; identity on the handle is not consulted."""
        record = make_record("a.ts")
        handle = store.put(FileIdentity("/ws/a.ts"), record)
        echoed = SummaryHandle(
            key=handle.key, identity=FileIdentity("/nowhere"), statements=Ratio(0, 0)
        )
        assert store.lookup_by_handle(echoed) is record

    def test_unknown_handle(self, store: RecordStore) -> None:
        handle = SummaryHandle(key=999, identity=FileIdentity("/ws/a.ts"), statements=Ratio(0, 0))
        assert store.lookup_by_handle(handle) is None


class TestLookupByIdentity:
    def test_exact(self, store: RecordStore, make_record: MakeRecord) -> None:
        record = make_record("a.ts")
        store.put(FileIdentity("/ws/src/a.ts"), record)
        assert store.lookup_by_identity(FileIdentity("/ws/src/a.ts")) is record

    def test_suffix_match(self, store: RecordStore, make_record: MakeRecord) -> None:
        record = make_record("a.ts")
        store.put(FileIdentity("/ws/src/a.ts"), record)
        assert store.lookup_by_identity(FileIdentity("/mnt/host/ws/src/a.ts")) is record

    def test_suffix_respects_component_boundary(
        self, store: RecordStore, make_record: MakeRecord
    ) -> None:
        mine = make_record("myutil.ts")
        util = make_record("util.ts")
        store.put(FileIdentity("/ws/src/myutil.ts"), mine)
        store.put(FileIdentity("/ws/lib/util.ts"), util)
        # Falls through to filename-only, which picks the right name
        assert store.lookup_by_identity(FileIdentity("/other/util.ts")) is util

    def test_case_and_separator_normalized(
        self, store: RecordStore, make_record: MakeRecord
    ) -> None:
        record = make_record("a.ts")
        store.put(FileIdentity("/ws/Src/A.ts"), record)
        assert store.lookup_by_identity(FileIdentity("C:\\WS\\src\\a.TS")) is record

    def test_filename_only_first_stored_wins(
        self, store: RecordStore, make_record: MakeRecord
    ) -> None:
        first = make_record("src/shared.ts")
        second = make_record("lib/shared.ts")
        store.put(FileIdentity("/ws/src/shared.ts"), first)
        store.put(FileIdentity("/ws/lib/shared.ts"), second)
        assert store.lookup_by_identity(FileIdentity("/elsewhere/x/shared.ts")) is first

    def test_fallback_is_memoized(self, store: RecordStore, make_record: MakeRecord) -> None:
        record = make_record("a.ts")
        store.put(FileIdentity("/ws/src/a.ts"), record)
        requested = FileIdentity("/mnt/ws/src/a.ts")

        assert store.match_identity(requested) == FileIdentity("/ws/src/a.ts")
        assert store._aliases[requested] == FileIdentity("/ws/src/a.ts")
        assert store.lookup_by_identity(requested) is record

    def test_miss_returns_none(self, store: RecordStore, make_record: MakeRecord) -> None:
        store.put(FileIdentity("/ws/src/a.ts"), make_record("a.ts"))
        assert store.lookup_by_identity(FileIdentity("/ws/src/b.ts")) is None

    def test_empty_store(self, store: RecordStore) -> None:
        assert store.lookup_by_identity(FileIdentity("/ws/a.ts")) is None


class TestBeginSession:
    def test_clears_everything(self, store: RecordStore, make_record: MakeRecord) -> None:
        identity = FileIdentity("/ws/a.ts")
        handle = store.put(identity, make_record("a.ts"))
        store.lookup_by_identity(FileIdentity("/mnt/ws/a.ts"))

        store.begin_session()

        assert store.lookup_by_identity(identity) is None
        assert store.lookup_by_handle(handle) is None
        assert store.lookup_by_identity(FileIdentity("/mnt/ws/a.ts")) is None
        assert store.handles() == []
        assert len(store) == 0

    def test_idempotent(self, store: RecordStore, make_record: MakeRecord) -> None:
        identity = FileIdentity("/ws/a.ts")
        handle = store.put(identity, make_record("a.ts"))
        store.begin_session()
        store.begin_session()
        assert store.lookup_by_identity(identity) is None
        assert store.lookup_by_handle(handle) is None

    def test_old_handle_never_aliases_new_record(
        self, store: RecordStore, make_record: MakeRecord
    ) -> None:
        old = store.put(FileIdentity("/ws/a.ts"), make_record("a.ts"))
        store.begin_session()
        new = store.put(FileIdentity("/ws/b.ts"), make_record("b.ts"))
        assert new.key != old.key
        assert store.lookup_by_handle(old) is None


class TestRatio:
    def test_rate(self) -> None:
        assert Ratio(1, 4).rate == 0.25

    def test_zero_total(self) -> None:
        assert Ratio(3, 0).rate == 0.0
