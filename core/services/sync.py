from __future__ import annotations

import json
from typing import Any

import requests

from core.config import Settings
from core.errors import RemoteNotConfigured, RemoteSyncError, SnapshotError
from core.logger import get_logger
from core.model import (
    BakeryState,
    breads_from_json,
    materials_from_json,
    recipes_from_json,
    sales_from_json,
)
from core.schema import SNAPSHOT_KEYS

log = get_logger("sync")

_PARSERS = {
    "breads": breads_from_json,
    "materials": materials_from_json,
    "recipes": recipes_from_json,
    "sales": sales_from_json,
}


def snapshot(state: BakeryState) -> dict:
    # The derived cost cache is not part of a snapshot.
    return {key: state.document(key) for key in SNAPSHOT_KEYS}


def export_snapshot(state: BakeryState) -> str:
    return json.dumps(snapshot(state), indent=2, ensure_ascii=False)


def apply_snapshot(state: BakeryState, data: Any) -> list[str]:
    """
    Replace each collection present in `data`; absent keys keep their current
    value. All four collections are persisted afterwards. Returns the keys
    that were replaced.
    """
    if not isinstance(data, dict):
        raise SnapshotError("Invalid JSON")

    parsed = {key: _PARSERS[key](data[key]) for key in SNAPSHOT_KEYS if data.get(key) is not None}
    for key, value in parsed.items():
        setattr(state, key, value)

    state.persist(*SNAPSHOT_KEYS)
    log.info("Snapshot applied: %s", ", ".join(parsed) or "nothing")
    return list(parsed)


def import_snapshot(state: BakeryState, text: str) -> list[str]:
    try:
        data = json.loads(text or "")
    except ValueError:
        raise SnapshotError("Invalid JSON")
    return apply_snapshot(state, data)


# -------------------------
# Remote (JSONBin) sync
# -------------------------

def _require_remote(settings: Settings) -> None:
    if not settings.remote_configured:
        raise RemoteNotConfigured(
            "Remote sync is not configured. Set BAKERY_JSONBIN_BIN_ID and BAKERY_JSONBIN_API_KEY."
        )


def _bin_url(settings: Settings, suffix: str = "") -> str:
    return f"{settings.jsonbin_base_url}/b/{settings.jsonbin_bin_id}{suffix}"


def push_remote(state: BakeryState, settings: Settings) -> None:
    """Replace the remote document with the current snapshot."""
    _require_remote(settings)
    try:
        resp = requests.put(
            _bin_url(settings),
            json=snapshot(state),
            headers={"Content-Type": "application/json", "X-Master-Key": settings.jsonbin_api_key},
            timeout=settings.request_timeout,
        )
    except requests.RequestException as e:
        log.warning("Upload error: %s", e)
        raise RemoteSyncError("Upload error") from e

    if not resp.ok:
        log.warning("Upload failed: HTTP %s", resp.status_code)
        raise RemoteSyncError("Upload failed")
    log.info("Uploaded snapshot to remote bin %s", settings.jsonbin_bin_id)


def pull_remote(state: BakeryState, settings: Settings) -> list[str]:
    """Fetch the latest remote document and apply it like a local import."""
    _require_remote(settings)
    try:
        resp = requests.get(
            _bin_url(settings, "/latest"),
            headers={"X-Master-Key": settings.jsonbin_api_key},
            timeout=settings.request_timeout,
        )
        resp.raise_for_status()
        payload = resp.json()
    except (requests.RequestException, ValueError) as e:
        log.warning("Download error: %s", e)
        raise RemoteSyncError("Download error") from e

    record = payload.get("record") if isinstance(payload, dict) else None
    if not isinstance(record, dict):
        raise RemoteSyncError("Download error")
    return apply_snapshot(state, record)
