"""Tests for sync configuration."""
from pathlib import Path
import re
from unittest.mock import patch

from synclab.config import SyncConfig
from synclab.core.receipt import emit_receipt, payload_hash, utc_now


class TestSyncConfig:
    """Tests for configuration loading and validation."""

    def test_default_config(self):
        config = SyncConfig()

        assert config.latency_ms == 400
        assert config.sync_timeout_ms == 5000
        assert config.queue_key != config.server_key
        assert config.emit_receipts is True
        assert config.validate() == []

    def test_config_from_env(self):
        env = {
            "SYNCLAB_LATENCY_MS": "50",
            "SYNCLAB_STORAGE_DIR": "/tmp/synclab-test",
            "SYNCLAB_EMIT_RECEIPTS": "false",
        }
        with patch.dict("os.environ", env):
            config = SyncConfig.from_env()

        assert config.latency_ms == 50
        assert config.latency_seconds == 0.05
        assert config.storage_dir == Path("/tmp/synclab-test")
        assert config.emit_receipts is False

    def test_config_validation(self):
        errors = SyncConfig(latency_ms=-5, sync_timeout_ms=0).validate()

        assert any("latency" in e for e in errors)
        assert any("timeout" in e for e in errors)

    def test_keys_must_differ(self):
        errors = SyncConfig(queue_key="same", server_key="same").validate()
        assert any("differ" in e for e in errors)


class TestReceipts:
    """Tests for receipt emission."""

    def test_payload_hash_is_key_order_independent(self):
        assert payload_hash({"a": 1, "b": 2}) == payload_hash({"b": 2, "a": 1})
        assert len(payload_hash("x")) == 64

    def test_emit_receipt_fields(self, capsys):
        receipt = emit_receipt("sync_transition", {"to_state": "synced"})

        assert receipt["receipt_type"] == "sync_transition"
        assert receipt["tenant_id"] == "default"
        assert receipt["ts"].endswith("Z")
        assert receipt["payload_hash"] == payload_hash({"to_state": "synced"})
        assert '"to_state": "synced"' in capsys.readouterr().out

    def test_emit_receipt_silent(self, capsys):
        emit_receipt("offline_enqueue", {"answer": "HLS"}, echo=False)
        assert capsys.readouterr().out == ""

    def test_utc_now_fixed_millisecond_precision(self):
        ts = utc_now()

        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", ts)
