"""Visit API schemas."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.domain import Visit


class VisitModel(BaseModel):
    id: str
    user_id: str
    user_name: str
    client_name: str
    client_type: str
    date: str
    type: str
    result: str
    summary: str = ""
    region: Optional[str] = None
    cnpj: Optional[str] = None
    details: dict[str, Any] = Field(default_factory=dict)
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def from_domain(cls, visit: Visit) -> "VisitModel":
        return cls(
            id=visit.id,
            user_id=visit.user_id,
            user_name=visit.user_name,
            client_name=visit.client_name,
            client_type=visit.client_type,
            date=visit.date,
            type=visit.type,
            result=visit.result,
            summary=visit.summary,
            region=visit.region,
            cnpj=visit.cnpj,
            details=visit.details,
            latitude=visit.latitude,
            longitude=visit.longitude,
        )


class VisitCreateRequest(BaseModel):
    """Body of the new-visit form; also accepts the legacy local payload."""

    client_name: str = Field(..., min_length=1)
    cnpj: Optional[str] = None
    region: Optional[str] = None
    date: Optional[str] = Field(default=None, description="ISO date, defaults to today")
    client_type: Literal["POSTO", "TRR_CONSUMIDOR", "FROTA", "OUTRO"] = "POSTO"
    type: Literal["PROSPECCAO", "NEGOCIACAO", "RELACIONAMENTO", "POS_VENDA"] = "PROSPECCAO"
    result: Literal["ALCANCADO", "PARCIAL", "NAO_ALCANCADO"] = "PARCIAL"
    summary: str = ""
    details: dict[str, Any] = Field(default_factory=dict)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    user_id: Optional[str] = Field(default=None, description="Reporting user; only honoured by the local store")

    @field_validator("client_type", "type", "result", mode="before")
    @classmethod
    def _upper_enum(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("user_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class VisitCreatedResponse(BaseModel):
    id: str
    visit: VisitModel


class VisitOptionsResponse(BaseModel):
    salespeople: List[str]
    cities: List[str]


class HomeSummaryResponse(BaseModel):
    today: int
    month: int
    pending: int
    recent: List[VisitModel]
