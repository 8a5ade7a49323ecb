from __future__ import annotations

import asyncio
import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Tuple

from airport_lookup.core.errors import SearchStoreError

if TYPE_CHECKING:
    from airport_lookup.services.candidates import CandidateFilter

logger = logging.getLogger(__name__)

DATA_PATH = Path(__file__).resolve().parent / "airports_search.csv"

# Columns of the airports_search view, in select order
FIELDS = (
    "airport_id",
    "airport_code",
    "airport_code_adjusted",
    "gps_code",
    "local_code",
    "iata_code",
    "airport",
    "municipality",
    "region",
    "region_name",
    "continent",
    "country_code",
    "country_name",
    "airport_type",
    "latitude",
    "longitude",
    "search_terms",
    "dropdown",
)

CODE_FIELDS = ("iata_code", "gps_code", "local_code", "airport_code", "airport_code_adjusted")


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _terms(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        # CSV stores the tag array pipe-separated
        value = value.split("|")
    return tuple(t.strip() for t in value if t and str(t).strip())


@dataclass(frozen=True)
class AirportRecord:
    airport_id: str
    name: str
    country_code: str
    iata_code: Optional[str] = None
    gps_code: Optional[str] = None
    local_code: Optional[str] = None
    airport_code: Optional[str] = None
    airport_code_adjusted: Optional[str] = None
    municipality: Optional[str] = None
    region: Optional[str] = None
    region_name: Optional[str] = None
    continent: Optional[str] = None
    country_name: Optional[str] = None
    airport_type: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    dropdown: Optional[str] = None
    search_terms: Tuple[str, ...] = ()

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AirportRecord":
        """Build a record from a store row (PostgREST JSON or CSV dict)."""
        return cls(
            airport_id=_text(row.get("airport_id")) or "",
            name=_text(row.get("airport")) or "",
            country_code=(_text(row.get("country_code")) or "").upper(),
            iata_code=_text(row.get("iata_code")),
            gps_code=_text(row.get("gps_code")),
            local_code=_text(row.get("local_code")),
            airport_code=_text(row.get("airport_code")),
            airport_code_adjusted=_text(row.get("airport_code_adjusted")),
            municipality=_text(row.get("municipality")),
            region=_text(row.get("region")),
            region_name=_text(row.get("region_name")),
            continent=_text(row.get("continent")),
            country_name=_text(row.get("country_name")),
            airport_type=_text(row.get("airport_type")),
            latitude=_float(row.get("latitude")),
            longitude=_float(row.get("longitude")),
            dropdown=_text(row.get("dropdown")),
            search_terms=_terms(row.get("search_terms")),
        )

    def codes(self) -> List[str]:
        """Non-empty code fields, trimmed and upper-cased."""
        out = []
        for f in CODE_FIELDS:
            v = getattr(self, f)
            if v:
                out.append(v.strip().upper())
        return out


class CsvAirportStore:
    """
    Local reference store backed by the CSV written by scripts/build_airports_csv.py.
    Evaluates the candidate filter in process, so results match the Supabase store
    up to row order.
    """

    def __init__(self, csv_path: Path = DATA_PATH):
        self.csv_path = Path(csv_path)
        self._all: List[AirportRecord] = []
        self._loaded = False

    def load(self) -> None:
        if self._loaded:
            return
        if not self.csv_path.exists():
            raise SearchStoreError(
                f"Airport dataset not found at {self.csv_path}. "
                f"Run scripts/build_airports_csv.py to generate it."
            )

        records: List[AirportRecord] = []
        with self.csv_path.open("r", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for row in reader:
                rec = AirportRecord.from_row(row)
                if not rec.airport_id:
                    continue
                records.append(rec)

        # only publish a complete read
        self._all = records
        self._loaded = True
        logger.info("Loaded %d airports from %s", len(records), self.csv_path)

    def all(self) -> List[AirportRecord]:
        self.load()
        return list(self._all)

    async def fetch(self, candidate_filter: "CandidateFilter", limit: int) -> List[AirportRecord]:
        if not self._loaded:
            # first read runs in a worker thread
            await asyncio.to_thread(self.load)
        out: List[AirportRecord] = []
        for rec in self._all:
            if candidate_filter.matches(rec):
                out.append(rec)
                if len(out) >= limit:
                    break
        return out
