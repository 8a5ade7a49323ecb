import pytest
from pydantic import ValidationError

from airport_lookup.api import deps
from airport_lookup.clients.kv import KvRestClient
from airport_lookup.clients.supabase import SupabaseAirportStore
from airport_lookup.core.config import Settings, settings
from airport_lookup.data.airports_repo import CsvAirportStore
from airport_lookup.utils.cache import MemoryCache


def test_cache_backend_selection(monkeypatch):
    monkeypatch.setattr(settings, "kv_rest_api_url", None)
    assert isinstance(deps.get_cache_backend(), MemoryCache)

    monkeypatch.setattr(settings, "kv_rest_api_url", "https://kv.example")
    monkeypatch.setattr(settings, "kv_rest_api_token", None)
    monkeypatch.setattr(settings, "kv_rest_api_read_only_token", "ro")
    backend = deps.get_cache_backend()
    assert isinstance(backend, KvRestClient)
    assert backend.can_write is False


def test_store_selection(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "airport_store", "supabase")
    assert isinstance(deps.get_airport_store(), SupabaseAirportStore)

    monkeypatch.setattr(settings, "airport_store", "csv")
    monkeypatch.setattr(settings, "airports_csv_path", str(tmp_path / "a.csv"))
    monkeypatch.setattr(deps, "_csv_store", None)
    store = deps.get_airport_store()
    assert isinstance(store, CsvAirportStore)
    assert deps.get_airport_store() is store


def test_ranking_policy_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "home_country_code", "GB")
    monkeypatch.setattr(settings, "facility_weights", {"large_airport": 9})
    policy = deps.get_ranking_policy()
    assert policy.home_country == "GB"
    assert policy.facility_weight("large_airport") == 9
    assert policy.facility_weight("small_airport") == 0


@pytest.mark.parametrize(
    "field, value",
    [("search_overfetch", 500), ("search_max_limit", 50), ("search_default_limit", 0)],
)
def test_settings_reject_out_of_range_search_bounds(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})
