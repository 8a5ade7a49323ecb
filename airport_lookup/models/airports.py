from pydantic import BaseModel, Field
from typing import List, Optional

class AirportItem(BaseModel):
    id: str
    label: str
    code: Optional[str] = None
    iata: Optional[str] = None
    icao: Optional[str] = None
    name: str
    municipality: Optional[str] = None
    country_code: str
    country_name: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    airport_type: Optional[str] = None


class AirportSearchResponse(BaseModel):
    items: List[AirportItem] = Field(default_factory=list)
    error: Optional[str] = None

    def to_json(self) -> str:
        """Body sent to clients and stored in the cache; 'error' only when set."""
        if self.error is None:
            return self.model_dump_json(exclude={"error"})
        return self.model_dump_json()
