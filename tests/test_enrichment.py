"""Tests for checksum decoding and batched metadata enrichment."""

from __future__ import annotations

import logging
import threading
import time

from fakes import FakeSource

from WheelIndex.catalog import CatalogEntry, decode_checksum, enrich_entries, fetch_metadata_batch
from WheelIndex.catalog.enrichment import fetch_object_metadata, parse_checksum
from WheelIndex.storage.base import ObjectHead

KEY = "whl/cu121/torch-2.1.0+cu121-cp311-cp311-linux_x86_64.whl"


class TestChecksumDecoding:
    """Base64 to hex conversion and rejection rules."""

    def test_decode_base64_to_hex(self):
        assert decode_checksum("YWJj") == "616263"

    def test_multipart_digest_is_discarded(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert decode_checksum("YWJjZA==-3") is None
        assert "multipart" in caplog.text

    def test_invalid_base64_is_discarded(self):
        assert decode_checksum("not base64!") is None

    def test_native_checksum_wins_over_user_metadata(self):
        head = ObjectHead(checksum_base64="YWJj", metadata={"checksum-sha256": "ffff"})
        assert parse_checksum(head) == "616263"

    def test_user_metadata_fallback(self):
        digest = "AB" * 32
        head = ObjectHead(metadata={"checksum-sha256": f" {digest} "})
        assert parse_checksum(head) == digest.lower()

    def test_second_metadata_field_used_when_first_is_malformed(self, caplog):
        digest = "0f" * 32
        head = ObjectHead(
            metadata={"checksum-sha256": "abc", "x-amz-meta-checksum-sha256": digest}
        )
        with caplog.at_level(logging.WARNING):
            assert parse_checksum(head) == digest
        assert "malformed" in caplog.text

    def test_malformed_user_metadata_is_discarded(self):
        head = ObjectHead(metadata={"checksum-sha256": '"><script>x</script>'})
        assert parse_checksum(head) is None

    def test_no_checksum(self):
        assert parse_checksum(ObjectHead(size=10)) is None


class TestFetchObjectMetadata:
    """Per-key lookups of the artifact and its sibling metadata object."""

    def test_artifact_and_sibling(self):
        source = FakeSource(
            {
                KEY: ObjectHead(size=3, checksum_base64="YWJj"),
                KEY + ".metadata": ObjectHead(size=1, checksum_base64="ZGVm"),
            }
        )
        meta = fetch_object_metadata(source, KEY)
        assert meta.checksum == "616263"
        assert meta.size == 3
        assert meta.metadata_checksum == "646566"

    def test_missing_sibling_is_silent(self, caplog):
        source = FakeSource({KEY: ObjectHead(size=3, checksum_base64="YWJj")})
        with caplog.at_level(logging.ERROR):
            meta = fetch_object_metadata(source, KEY)
        assert meta.metadata_checksum is None
        assert meta.checksum == "616263"
        assert source.head_calls == [KEY, KEY + ".metadata"]
        assert not caplog.records

    def test_sibling_failure_drops_only_sibling(self, caplog):
        source = FakeSource(
            {KEY: ObjectHead(size=3, checksum_base64="YWJj")},
            failing=[KEY + ".metadata"],
        )
        with caplog.at_level(logging.ERROR):
            meta = fetch_object_metadata(source, KEY)
        assert meta.checksum == "616263"
        assert meta.metadata_checksum is None
        assert "Error fetching metadata object" in caplog.text

    def test_main_lookup_failure_yields_empty_metadata(self):
        source = FakeSource(failing=[KEY])
        meta = fetch_object_metadata(source, KEY)
        assert meta.is_empty


class _TrackingSource(FakeSource):
    """Records the highest number of concurrent HEAD calls."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.in_flight = 0
        self.max_in_flight = 0
        self._counter = threading.Lock()

    def head_object(self, key):
        with self._counter:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            time.sleep(0.01)
            return super().head_object(key)
        finally:
            with self._counter:
                self.in_flight -= 1


class _RecordingSource(FakeSource):
    """Records ordered start/finish events per artifact, with uneven HEAD latency."""

    def __init__(self, *args, delays=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.delays = dict(delays or {})
        self.events = []
        self._sequence = 0
        self._events_lock = threading.Lock()

    def _record(self, kind, key):
        with self._events_lock:
            self._sequence += 1
            self.events.append((self._sequence, kind, key.removesuffix(".metadata")))

    def head_object(self, key):
        self._record("start", key)
        try:
            time.sleep(self.delays.get(key, 0.0))
            return super().head_object(key)
        finally:
            self._record("finish", key)


class TestBatchEnrichment:
    """Batch fetching and entry enrichment."""

    def test_batch_bounds_concurrency(self):
        keys = [f"whl/cpu/pkg{i}-1.0-py3-none-any.whl" for i in range(7)]
        source = _TrackingSource({k: ObjectHead(size=i) for i, k in enumerate(keys)})
        results = fetch_metadata_batch(source, keys, batch_size=3)
        assert [results[k].size for k in keys] == list(range(7))
        # each lookup also fetches its sibling, sequentially within the worker
        assert source.max_in_flight <= 3

    def test_next_batch_waits_for_previous_batch(self):
        keys = [f"whl/cpu/pkg{i}-1.0-py3-none-any.whl" for i in range(6)]
        source = _RecordingSource(
            {k: ObjectHead(size=i) for i, k in enumerate(keys)},
            delays={keys[0]: 0.08, keys[1]: 0.0, keys[2]: 0.02},
        )
        fetch_metadata_batch(source, keys, batch_size=3)

        first, second = set(keys[:3]), set(keys[3:])
        last_first_finish = max(
            seq for seq, kind, key in source.events if kind == "finish" and key in first
        )
        earliest_second_start = min(
            seq for seq, kind, key in source.events if kind == "start" and key in second
        )
        assert earliest_second_start > last_first_finish

    def test_duplicate_keys_are_fetched_once(self):
        source = FakeSource({KEY: ObjectHead(size=1)})
        fetch_metadata_batch(source, [KEY, KEY], batch_size=5)
        assert source.head_calls.count(KEY) == 1

    def test_enrich_entries_uses_original_key(self):
        entry = CatalogEntry.from_source_key(KEY)
        source = FakeSource({KEY: ObjectHead(size=3, checksum_base64="YWJj")})
        (enriched,) = enrich_entries([entry], source, batch_size=2)
        assert enriched.key == entry.key
        assert enriched.checksum == "616263"
        assert enriched.size == 3
        assert entry.checksum is None

    def test_failed_entries_come_back_unchanged(self):
        good = CatalogEntry.from_source_key("whl/cpu/a-1.0-py3-none-any.whl")
        bad = CatalogEntry.from_source_key("whl/cpu/b-1.0-py3-none-any.whl")
        source = FakeSource(
            {good.original_key: ObjectHead(checksum_base64="YWJj")},
            failing=[bad.original_key],
        )
        result = enrich_entries([good, bad], source)
        assert result[0].checksum == "616263"
        assert result[1] == bad
