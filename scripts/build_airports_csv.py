#!/usr/bin/env python3
from __future__ import annotations

import csv
import sys
from pathlib import Path
import httpx

from airport_lookup.data.airports_repo import DATA_PATH, FIELDS, AirportRecord
from airport_lookup.services.ranking import display_label

OURAIRPORTS = "https://davidmegginson.github.io/ourairports-data"
AIRPORTS_CSV = f"{OURAIRPORTS}/airports.csv"
COUNTRIES_CSV = f"{OURAIRPORTS}/countries.csv"
REGIONS_CSV = f"{OURAIRPORTS}/regions.csv"

# OurAirports types we never offer in a picker
SKIP_TYPES = {"closed", "balloonport"}


def _get_rows(client: httpx.Client, url: str) -> list[dict]:
    print(f"[download] {url}")
    r = client.get(url)
    r.raise_for_status()
    return list(csv.DictReader(r.text.splitlines()))


def _clean(s: str | None) -> str:
    return (s or "").strip()


def adjusted_code(row: dict) -> str:
    """
    OurAirports rows have:
      - ident: always present (can be '00AK', 'KATL', etc.)
      - gps_code: usually ICAO for airports that have one
    Prefer gps_code when present; else ident.
    """
    return _clean(row.get("gps_code")).upper() or _clean(row.get("ident")).upper()


def search_terms(row: dict) -> list[str]:
    terms = []
    for kw in _clean(row.get("keywords")).split(","):
        kw = kw.strip().upper()
        if kw:
            terms.append(kw)
    for f in ("iata_code", "gps_code", "local_code", "ident"):
        code = _clean(row.get(f)).upper()
        if code:
            terms.append(code)
    # stable de-dup
    return list(dict.fromkeys(terms))


def build_row(row: dict, countries: dict[str, str], regions: dict[str, str]) -> dict:
    country = _clean(row.get("iso_country")).upper()
    region = _clean(row.get("iso_region"))
    out = {
        "airport_id": _clean(row.get("id")),
        "airport_code": _clean(row.get("ident")).upper(),
        "airport_code_adjusted": adjusted_code(row),
        "gps_code": _clean(row.get("gps_code")).upper(),
        "local_code": _clean(row.get("local_code")).upper(),
        "iata_code": _clean(row.get("iata_code")).upper(),
        "airport": _clean(row.get("name")),
        "municipality": _clean(row.get("municipality")),
        "region": region,
        "region_name": regions.get(region, ""),
        "continent": _clean(row.get("continent")),
        "country_code": country,
        "country_name": countries.get(country, ""),
        "airport_type": _clean(row.get("type")),
        "latitude": _clean(row.get("latitude_deg")),
        "longitude": _clean(row.get("longitude_deg")),
        "search_terms": "|".join(search_terms(row)),
        "dropdown": "",
    }
    out["dropdown"] = display_label(AirportRecord.from_row(out))
    return out


def main(out_path: Path = DATA_PATH) -> int:
    with httpx.Client(timeout=60.0) as client:
        airports = _get_rows(client, AIRPORTS_CSV)
        countries = {_clean(c.get("code")).upper(): _clean(c.get("name")) for c in _get_rows(client, COUNTRIES_CSV)}
        regions = {_clean(r.get("code")): _clean(r.get("name")) for r in _get_rows(client, REGIONS_CSV)}

    rows = []
    seen = set()
    for row in airports:
        if _clean(row.get("type")) in SKIP_TYPES:
            continue
        out = build_row(row, countries, regions)
        if not out["airport_id"] or out["airport_id"] in seen:
            continue
        seen.add(out["airport_id"])
        rows.append(out)

    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(FIELDS))
        writer.writeheader()
        writer.writerows(rows)

    print(f"[ok] wrote {len(rows):,} airports -> {out_path.as_posix()}")
    print("[tip] set AIRPORT_STORE=csv to serve lookups from this file.")
    return 0

if __name__ == "__main__":
    raise SystemExit(main(Path(sys.argv[1]) if len(sys.argv) > 1 else DATA_PATH))
