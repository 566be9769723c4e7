"""HTTP client for reverse geocoding device coordinates into a region label."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import settings
from ..errors import GeocodingError

logger = logging.getLogger(__name__)

UNKNOWN_CITY = "Desconhecida"
UNAVAILABLE_LABEL = "Localização indisponível"

STATE_ABBREVIATIONS: dict[str, str] = {
    "Acre": "AC",
    "Alagoas": "AL",
    "Amapá": "AP",
    "Amazonas": "AM",
    "Bahia": "BA",
    "Ceará": "CE",
    "Distrito Federal": "DF",
    "Espírito Santo": "ES",
    "Goiás": "GO",
    "Maranhão": "MA",
    "Mato Grosso": "MT",
    "Mato Grosso do Sul": "MS",
    "Minas Gerais": "MG",
    "Pará": "PA",
    "Paraíba": "PB",
    "Paraná": "PR",
    "Pernambuco": "PE",
    "Piauí": "PI",
    "Rio de Janeiro": "RJ",
    "Rio Grande do Norte": "RN",
    "Rio Grande do Sul": "RS",
    "Rondônia": "RO",
    "Roraima": "RR",
    "Santa Catarina": "SC",
    "São Paulo": "SP",
    "Sergipe": "SE",
    "Tocantins": "TO",
}


@dataclass(slots=True)
class ReverseGeocodeResult:
    region: str
    city: Optional[str]
    state: Optional[str]
    latitude: float
    longitude: float
    resolved: bool


def format_region(address: dict) -> tuple[str, str, str]:
    """Return ``(label, city, state_abbr)`` from a Nominatim ``address`` block."""

    city = address.get("city") or address.get("town") or address.get("village") or UNKNOWN_CITY
    state = address.get("state") or ""
    state_abbr = STATE_ABBREVIATIONS.get(state, state)
    label = f"{city}-{state_abbr}" if state_abbr else city
    return label, city, state_abbr


class ReverseGeocoder:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        user_agent: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoding_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.geocoding_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.geocoding_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.geocoding_backoff_seconds
        self.user_agent = user_agent or settings.geocoding_user_agent
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"User-Agent": self.user_agent, "Accept-Language": "pt-BR"},
            transport=self._transport,
        )

    def _fetch(self, latitude: float, longitude: float) -> dict:
        params = {"format": "json", "lat": latitude, "lon": longitude}
        url = f"{self.base_url}/reverse"
        with self._get_client() as client:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    data = response.json()
                    if not isinstance(data, dict) or "address" not in data:
                        raise GeocodingError("Reverse geocoding response has no address block.")
                    return data
                except httpx.HTTPStatusError as e:
                    if e.response.status_code < 500:
                        raise GeocodingError(f"Reverse geocoding rejected the request: {e}") from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise GeocodingError(f"Reverse geocoding failed after {attempt} attempts: {e}") from e
                    time.sleep(self.backoff_seconds * attempt)
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise GeocodingError(f"Reverse geocoding service is not reachable: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))  # Exponential backoff
                    logger.debug(f"Geocoder network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except ValueError as e:
                    raise GeocodingError(f"Reverse geocoding returned invalid JSON: {e}") from e

    def reverse(self, latitude: float, longitude: float) -> ReverseGeocodeResult:
        """Resolve coordinates into ``City-UF``; raises :class:`GeocodingError`."""

        data = self._fetch(latitude, longitude)
        label, city, state_abbr = format_region(data.get("address") or {})
        return ReverseGeocodeResult(
            region=label,
            city=city,
            state=state_abbr or None,
            latitude=latitude,
            longitude=longitude,
            resolved=True,
        )

    def reverse_or_placeholder(self, latitude: float, longitude: float) -> ReverseGeocodeResult:
        """Like :meth:`reverse` but degrades to the "unavailable" label on failure."""

        try:
            return self.reverse(latitude, longitude)
        except GeocodingError as exc:
            logger.warning(f"Reverse geocoding failed for ({latitude}, {longitude}): {exc}")
            return ReverseGeocodeResult(
                region=UNAVAILABLE_LABEL,
                city=None,
                state=None,
                latitude=latitude,
                longitude=longitude,
                resolved=False,
            )
