"""
Target-country checks for raw provider results.

Each provider family exposes country information differently, so every
classifier walks its own signals in priority order:

1. an explicit structured country code or field (a mismatch is conclusive)
2. the country name inside free-text address fields
3. a provider-specific secondary hint

A result that matches none of them is "not confirmed". Callers only soften
confidence for such results; they are never dropped here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...core.config import Settings
from .payloads import GooglePlaceResult, GooglePrediction, MapmyIndiaPlace, NominatimPlace


@dataclass(frozen=True)
class TargetCountry:
    code: str
    name: str
    alpha3: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> "TargetCountry":
        return cls(
            code=settings.target_country_code,
            name=settings.target_country_name,
            alpha3=settings.target_country_alpha3,
        )

    def mentioned_in(self, *texts: str) -> bool:
        needle = self.name.lower()
        return any(needle in (text or "").lower() for text in texts)

    def matches_code(self, value: str) -> Optional[bool]:
        """None when no code is present, otherwise whether it is ours."""
        cleaned = (value or "").strip().lower()
        if not cleaned:
            return None
        return cleaned in {self.code.lower(), self.alpha3.lower(), self.name.lower()}


def google_place_in_country(result: GooglePlaceResult, country: TargetCountry) -> bool:
    for component in result.address_components:
        if "country" in component.types:
            matched = country.matches_code(component.short_name or component.long_name)
            if matched is not None:
                return matched
    if country.mentioned_in(result.formatted_address, result.vicinity):
        return True
    if result.plus_code and country.mentioned_in(result.plus_code.compound_code):
        return True
    return False


def google_prediction_in_country(prediction: GooglePrediction, country: TargetCountry) -> bool:
    # Predictions carry no structured country field.
    if country.mentioned_in(prediction.description):
        return True
    return any(country.mentioned_in(term.value) for term in prediction.terms)


def mapmyindia_place_in_country(place: MapmyIndiaPlace, country: TargetCountry) -> bool:
    location = place.place_location
    raw_country = place.country or (location.country if location else "")
    matched = country.matches_code(raw_country)
    if matched is not None:
        return matched
    raw_region = place.region or (location.region if location else "")
    if raw_region and country.matches_code(raw_region):
        return True
    if country.mentioned_in(place.place_address, place.place_name, place.description):
        return True
    # eLoc codes are only issued for locations inside India.
    return bool(place.e_loc)


def nominatim_place_in_country(place: NominatimPlace, country: TargetCountry) -> bool:
    address = place.address
    if address is not None:
        matched = country.matches_code(address.country_code)
        if matched is not None:
            return matched
    if country.mentioned_in(place.display_name):
        return True
    return address is not None and country.mentioned_in(address.country)
