"""Configuration from environment variables."""

from decimal import Decimal
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Batch-driven whole-dataset pass
    batch_size: int = Field(default=50, gt=0)
    batch_minimum_confidence: Decimal = Field(default=Decimal("0.15"), ge=0, le=1)

    # Narrower single-category passes
    category_minimum_confidence: Decimal = Field(default=Decimal("0.30"), ge=0, le=1)

    # Greedy assignment iterates this side and scores it against the other
    driving_side: Literal["expense", "booking"] = "expense"

    # Strategy for the whole-dataset pass, and the flight policy used by "auto"
    strategy: Literal["auto", "generic", "flight", "flight_card_gate"] = "auto"
    flight_policy: Literal["flight", "flight_card_gate"] = "flight"

    # Drop bookings without a usable card before the batch loop
    require_valid_card: bool = True

    class Config:
        env_prefix = "TRAVELRECON_"
        case_sensitive = False


settings = Settings()


# Travel-type alias groups, keyed by canonical category name
TRAVEL_TYPE_ALIASES: dict[str, list[str]] = {
    "flight": ["air", "airline", "airfare", "plane", "aviation"],
    "hotel": ["lodging", "accommodation", "room"],
    "car": ["vehicle", "rental", "auto", "automobile"],
    "rail": ["train", "railway", "railroad"],
    "taxi": ["cab", "ride", "uber", "lyft"],
}

# Airline names and IATA codes seen in booking vendor fields
AIRLINE_NAMES = [
    "delta", "american", "united", "southwest", "alaska", "jetblue", "frontier", "spirit",
    "lufthansa", "british airways", "air france", "klm", "emirates", "qatar", "etihad",
    "singapore airlines", "cathay pacific", "air canada", "virgin", "qantas",
]
AIRLINE_CODES = [
    "aa", "dl", "ua", "wn", "as", "b6", "f9", "nk", "lh", "ba", "af", "kl", "ek", "qr", "ey",
    "sq", "cx", "ac", "vs", "qf",
]

# Full airline name -> carrier code, for merchant strings that carry only the code
AIRLINE_NAME_TO_CODE = {
    "delta": "dl",
    "american": "aa",
    "united": "ua",
    "southwest": "wn",
    "lufthansa": "lh",
    "british airways": "ba",
}
