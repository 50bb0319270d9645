"""Core receipt primitives used by every synclab module.

Functions:
    payload_hash: SHA-256 hex digest of a JSON-serializable payload
    utc_now: Current UTC time as an ISO-8601 string, milliseconds, Z suffix
    emit_receipt: Emit receipt with required fields to stdout
    StopRule: Exception for stoprule triggers
"""
import hashlib
import json
from datetime import datetime, timezone


class StopRule(Exception):
    """Raised when stoprule triggers. Never catch silently."""
    pass


def payload_hash(data: bytes | str | dict | list) -> str:
    """Compute SHA-256 hex digest of a payload.

    Dicts and lists are serialized with sorted keys and compact separators
    so equal payloads always hash the same. Pure function.

    Args:
        data: Bytes, string, dict or list to hash

    Returns:
        64-char lowercase hex digest
    """
    if isinstance(data, (dict, list)):
        data = json.dumps(data, sort_keys=True, separators=(",", ":"))
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def utc_now() -> str:
    """Return current UTC time as ISO-8601 with millisecond precision and Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def emit_receipt(
    receipt_type: str,
    data: dict,
    tenant_id: str = "default",
    echo: bool = True,
) -> dict:
    """Emit a receipt with standard required fields.

    Prints JSON to stdout with flush=True unless echo is False.

    Args:
        receipt_type: Type of receipt (offline_enqueue, sync_transition, ...)
        data: Receipt payload data
        tenant_id: Tenant identifier (default: "default")
        echo: Print the receipt to stdout

    Returns:
        Complete receipt dict with receipt_type, ts, tenant_id, payload_hash
    """
    tenant_id = data.get("tenant_id", tenant_id)

    receipt = {
        "receipt_type": receipt_type,
        "ts": utc_now(),
        "tenant_id": tenant_id,
        "payload_hash": payload_hash(data),
        **data
    }

    if echo:
        print(json.dumps(receipt, sort_keys=True), flush=True)

    return receipt
