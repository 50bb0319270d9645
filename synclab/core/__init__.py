"""Core primitives: receipts, stoprule, constants."""
from .receipt import StopRule, emit_receipt, payload_hash, utc_now

__all__ = [
    "StopRule",
    "emit_receipt",
    "payload_hash",
    "utc_now",
]
