import httpx
import pytest

from checklist.errors import GeocodingError
from checklist.services.geocoding import ReverseGeocoder, format_region


def _geocoder(handler, max_retries: int = 1) -> ReverseGeocoder:
    return ReverseGeocoder(
        base_url="https://geo.test",
        max_retries=max_retries,
        backoff_seconds=0,
        transport=httpx.MockTransport(handler),
    )


def test_format_region_abbreviates_state() -> None:
    assert format_region({"city": "Belo Horizonte", "state": "Minas Gerais"}) == ("Belo Horizonte-MG", "Belo Horizonte", "MG")
    assert format_region({"town": "Paraty", "state": "Rio de Janeiro"})[0] == "Paraty-RJ"
    assert format_region({"state": "São Paulo"})[0] == "Desconhecida-SP"
    assert format_region({"village": "Lugarejo"})[0] == "Lugarejo"


def test_reverse_sends_coordinates_and_parses_address() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"address": {"city": "Contagem", "state": "Minas Gerais"}})

    result = _geocoder(handler).reverse(-19.93, -44.05)

    assert result.region == "Contagem-MG"
    assert result.resolved is True
    assert seen[0].url.path == "/reverse"
    assert seen[0].url.params["format"] == "json"
    assert seen[0].url.params["lat"] == "-19.93"


def test_server_errors_are_retried() -> None:
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            return httpx.Response(503)
        return httpx.Response(200, json={"address": {"city": "Betim", "state": "Minas Gerais"}})

    assert _geocoder(handler).reverse(-19.96, -44.19).region == "Betim-MG"
    assert len(attempts) == 2


def test_client_errors_fail_immediately() -> None:
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(400)

    with pytest.raises(GeocodingError):
        _geocoder(handler, max_retries=3).reverse(0, 0)
    assert len(attempts) == 1


def test_placeholder_when_service_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route", request=request)

    result = _geocoder(handler).reverse_or_placeholder(-19.9, -43.9)

    assert result.region == "Localização indisponível"
    assert result.resolved is False
    assert result.latitude == -19.9


def test_response_without_address_is_an_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": "Unable to geocode"})

    with pytest.raises(GeocodingError):
        _geocoder(handler).reverse(0, 0)
