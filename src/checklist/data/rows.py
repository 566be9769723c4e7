"""Translation between storage rows and domain records.

The managed backend stores visits in the ``visitas`` table with Portuguese
column names and lower-case enum values; the domain keeps English attribute
names and upper-case enums. Unknown or missing enum values fall back to the
first option of each category so a half-filled row still renders.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

from ..models.domain import (
    CLIENT_TYPES,
    ROLES,
    VISIT_RESULTS,
    VISIT_TYPES,
    NewVisit,
    UserProfile,
    Visit,
)

logger = logging.getLogger(__name__)

# Stored client type -> domain client type, for the two that differ.
_CLIENT_TYPE_FROM_STORAGE = {"TRR": "TRR_CONSUMIDOR", "TRANSPORTE": "FROTA"}
_CLIENT_TYPE_TO_STORAGE = {"TRR_CONSUMIDOR": "trr", "FROTA": "transporte"}


def _upper(value: Any) -> str:
    return str(value).strip().upper() if value not in (None, "") else ""


def parse_coordinate(value: Any, column: str = "coordinate") -> Optional[float]:
    """Stored coordinate as a float; unreadable values become ``None``."""

    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric {column} value '{value}'")
        return None


def normalize_client_type(value: Any) -> str:
    label = _upper(value)
    label = _CLIENT_TYPE_FROM_STORAGE.get(label, label)
    return label if label in CLIENT_TYPES else "POSTO"


def normalize_visit_type(value: Any) -> str:
    label = _upper(value)
    return label if label in VISIT_TYPES else "PROSPECCAO"


def normalize_visit_result(value: Any) -> str:
    label = _upper(value)
    return label if label in VISIT_RESULTS else "ALCANCADO"


def normalize_role(value: Any) -> str:
    label = _upper(value)
    return label if label in ROLES else "VENDEDOR"


def client_type_to_storage(client_type: str) -> str:
    return _CLIENT_TYPE_TO_STORAGE.get(client_type, client_type.lower())


def parse_details(value: Any) -> dict[str, Any]:
    """Accept a details bag as stored: a mapping, a JSON string, or nothing."""

    if not value:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as exc:
            logger.warning(f"Ignoring unreadable details bag: {exc}")
            return {}
        return dict(parsed) if isinstance(parsed, dict) else {}
    return {}


def visit_from_row(row: Mapping[str, Any]) -> Visit:
    """Build a :class:`Visit` from a ``visitas`` row."""

    return Visit(
        id=str(row.get("id") or ""),
        user_id=str(row.get("vendedor_id") or ""),
        user_name=row.get("vendedor_nome") or "",
        client_name=row.get("cliente_nome") or "",
        client_type=normalize_client_type(row.get("tipo_cliente")),
        date=row.get("data_visita") or "",
        type=normalize_visit_type(row.get("tipo_visita")),
        result=normalize_visit_result(row.get("objetivo_resultado")),
        summary=row.get("resumo") or "",
        region=row.get("cidade"),
        cnpj=row.get("cnpj"),
        details=parse_details(row.get("details")),
        latitude=parse_coordinate(row.get("latitude"), "latitude"),
        longitude=parse_coordinate(row.get("longitude"), "longitude"),
        raw=dict(row),
    )


def visit_to_row(visit: NewVisit) -> dict[str, Any]:
    """Build the insert payload for the ``visitas`` table."""

    return {
        "vendedor_id": visit.user_id,
        "vendedor_nome": visit.user_name,
        "cliente_nome": visit.client_name,
        "cnpj": visit.cnpj,
        "cidade": visit.region,
        "data_visita": visit.date,
        "tipo_cliente": client_type_to_storage(visit.client_type),
        "tipo_visita": visit.type.lower(),
        "objetivo_resultado": visit.result.lower(),
        "resumo": visit.summary,
        "details": visit.details,
        "latitude": visit.latitude,
        "longitude": visit.longitude,
    }


def profile_from_row(row: Mapping[str, Any]) -> UserProfile:
    """Build a :class:`UserProfile` from a ``profiles`` row."""

    active = row.get("active")
    return UserProfile(
        id=str(row.get("id") or ""),
        name=row.get("full_name") or row.get("name") or "",
        email=row.get("email") or "",
        role=normalize_role(row.get("role")),
        active=True if active is None else bool(active),
        phone=row.get("phone"),
        avatar_url=row.get("avatar_url"),
    )
