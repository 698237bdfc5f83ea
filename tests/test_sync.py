"""Tests for snapshot export/import and remote sync."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from core.config import Settings
from core.db import load
from core.errors import RemoteNotConfigured, RemoteSyncError, SnapshotError
from core.model import ALL, BakeryState, Material, RecipeLine, SaleLine
from core.services.costing import compute_cost_view
from core.services.sync import export_snapshot, import_snapshot, pull_remote, push_remote


@pytest.fixture
def full_state(baguette_state):
    baguette_state.breads.append("sangak")
    baguette_state.sales.append(SaleLine("baguette", 50, 2))
    baguette_state.bread_costs["baguette"] = 1000
    baguette_state.persist("breads", "sales", "breadCosts")
    return baguette_state


@pytest.fixture
def remote_settings(tmp_path: Path):
    return Settings(
        data_dir=tmp_path,
        db_path=tmp_path / "bakery.db",
        jsonbin_bin_id="bin123",
        jsonbin_api_key="key456",
        jsonbin_base_url="https://jsonbin.test/v3",
        request_timeout=5,
    )


class TestSnapshot:

    def test_export_shape(self, full_state):
        data = json.loads(export_snapshot(full_state))
        assert set(data) == {"breads", "materials", "recipes", "sales"}
        assert data["materials"] == [{"name": "flour", "price": 20000}]
        assert data["sales"] == [{"bread": "baguette", "benefit": 50, "num": 2}]

    def test_round_trip(self, full_state, conn):
        text = export_snapshot(full_state)
        before = (list(full_state.breads), list(full_state.materials), list(full_state.recipes), list(full_state.sales))

        import_snapshot(full_state, text)
        reloaded = BakeryState.load(conn)
        for s in (full_state, reloaded):
            assert (s.breads, s.materials, s.recipes, s.sales) == before

    def test_partial_import_replaces_only_present_keys(self, full_state, conn):
        before_breads = list(full_state.breads)
        before_recipes = list(full_state.recipes)
        before_sales = list(full_state.sales)

        replaced = import_snapshot(full_state, '{"materials":[{"name":"sugar","price":5000}]}')

        assert replaced == ["materials"]
        assert full_state.materials == [Material("sugar", 5000)]
        assert full_state.breads == before_breads
        assert full_state.recipes == before_recipes
        assert full_state.sales == before_sales
        assert load(conn, "materials").value == [{"name": "sugar", "price": 5000}]

    def test_empty_list_replaces(self, full_state):
        import_snapshot(full_state, '{"sales": []}')
        assert full_state.sales == []

    def test_import_leaves_cost_cache(self, full_state):
        import_snapshot(full_state, '{"breads": ["x"]}')
        assert full_state.bread_costs == {"baguette": 1000}

    def test_non_finite_numbers_dropped(self, full_state):
        text = (
            '{"materials": [{"name": "flour", "price": 1e999}, {"name": "salt", "price": 8000}],'
            ' "recipes": [{"bread": "baguette", "material": "salt", "qty": 1e999},'
            ' {"bread": "baguette", "material": "salt", "qty": 500}],'
            ' "sales": [{"bread": "baguette", "benefit": 1e999, "num": 1e999}]}'
        )
        import_snapshot(full_state, text)

        assert full_state.materials == [Material("salt", 8000)]
        assert full_state.recipes == [RecipeLine("baguette", "salt", 500)]
        assert full_state.sales == [SaleLine("baguette", 0, 0)]
        rows = compute_cost_view(full_state, ALL)
        assert {r.bread: r.unit_cost for r in rows}["baguette"] == 4000

    @pytest.mark.parametrize("text", ["", "not json", "[1, 2]", "42"])
    def test_invalid_text(self, full_state, text):
        before = export_snapshot(full_state)
        with pytest.raises(SnapshotError, match="Invalid JSON"):
            import_snapshot(full_state, text)
        assert export_snapshot(full_state) == before


class TestRemote:

    def test_not_configured(self, full_state, tmp_path):
        settings = Settings(data_dir=tmp_path, db_path=tmp_path / "bakery.db")
        with patch("core.services.sync.requests") as req:
            with pytest.raises(RemoteNotConfigured):
                push_remote(full_state, settings)
            with pytest.raises(RemoteNotConfigured):
                pull_remote(full_state, settings)
            req.put.assert_not_called()
            req.get.assert_not_called()

    @patch("core.services.sync.requests.put")
    def test_push(self, mock_put, full_state, remote_settings):
        mock_put.return_value = MagicMock(ok=True, status_code=200)
        push_remote(full_state, remote_settings)

        args, kwargs = mock_put.call_args
        assert args[0] == "https://jsonbin.test/v3/b/bin123"
        assert kwargs["headers"]["X-Master-Key"] == "key456"
        assert kwargs["timeout"] == 5
        assert set(kwargs["json"]) == {"breads", "materials", "recipes", "sales"}

    @patch("core.services.sync.requests.put")
    def test_push_http_failure(self, mock_put, full_state, remote_settings):
        mock_put.return_value = MagicMock(ok=False, status_code=401)
        with pytest.raises(RemoteSyncError, match="Upload failed"):
            push_remote(full_state, remote_settings)

    @patch("core.services.sync.requests.put")
    def test_push_network_error(self, mock_put, full_state, remote_settings):
        mock_put.side_effect = requests.ConnectionError("down")
        with pytest.raises(RemoteSyncError, match="Upload error"):
            push_remote(full_state, remote_settings)

    @patch("core.services.sync.requests.get")
    def test_pull_applies_record(self, mock_get, full_state, remote_settings):
        resp = MagicMock()
        resp.json.return_value = {"record": {"breads": ["Barbari"], "sales": []}, "metadata": {}}
        mock_get.return_value = resp

        replaced = pull_remote(full_state, remote_settings)

        assert mock_get.call_args[0][0] == "https://jsonbin.test/v3/b/bin123/latest"
        assert sorted(replaced) == ["breads", "sales"]
        assert full_state.breads == ["Barbari"]
        assert full_state.sales == []
        assert full_state.materials == [Material("flour", 20000)]

    @patch("core.services.sync.requests.get")
    def test_pull_failure_keeps_state(self, mock_get, full_state, remote_settings):
        mock_get.side_effect = requests.Timeout("slow")
        before = export_snapshot(full_state)
        with pytest.raises(RemoteSyncError, match="Download error"):
            pull_remote(full_state, remote_settings)
        assert export_snapshot(full_state) == before

    @patch("core.services.sync.requests.get")
    def test_pull_without_record(self, mock_get, full_state, remote_settings):
        resp = MagicMock()
        resp.json.return_value = {"message": "Bin not found"}
        mock_get.return_value = resp
        with pytest.raises(RemoteSyncError):
            pull_remote(full_state, remote_settings)
