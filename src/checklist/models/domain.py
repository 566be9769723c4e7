"""Domain models for users, clients, visits and notifications."""

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

Role = Literal["ADMIN", "GESTOR", "VENDEDOR"]
ClientType = Literal["POSTO", "TRR_CONSUMIDOR", "FROTA", "OUTRO"]
VisitType = Literal["PROSPECCAO", "NEGOCIACAO", "RELACIONAMENTO", "POS_VENDA"]
VisitResult = Literal["ALCANCADO", "PARCIAL", "NAO_ALCANCADO"]

ROLES: tuple[str, ...] = ("ADMIN", "GESTOR", "VENDEDOR")
PRIVILEGED_ROLES: frozenset[str] = frozenset({"ADMIN", "GESTOR"})
CLIENT_TYPES: tuple[str, ...] = ("POSTO", "TRR_CONSUMIDOR", "FROTA", "OUTRO")
VISIT_TYPES: tuple[str, ...] = ("PROSPECCAO", "NEGOCIACAO", "RELACIONAMENTO", "POS_VENDA")
VISIT_RESULTS: tuple[str, ...] = ("ALCANCADO", "PARCIAL", "NAO_ALCANCADO")


@dataclass(slots=True)
class UserProfile:
    """A person who can sign in, with the role that scopes what they see."""

    id: str
    name: str
    email: str
    role: Role
    active: bool = True
    phone: Optional[str] = None
    avatar_url: Optional[str] = None

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES


@dataclass(slots=True)
class Client:
    """Visit subject as kept by the local store."""

    id: int
    name: str
    cnpj: Optional[str]
    region: Optional[str]
    client_type: ClientType = "POSTO"


@dataclass(slots=True)
class Visit:
    """A logged field interaction between a sales representative and a client."""

    id: str
    user_id: str
    user_name: str
    client_name: str
    client_type: ClientType
    date: str
    type: VisitType
    result: VisitResult
    summary: str = ""
    region: Optional[str] = None
    cnpj: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class NewVisit:
    """Fields captured by the visit form before storage assigns an id."""

    user_id: str
    user_name: str
    client_name: str
    client_type: ClientType
    date: str
    type: VisitType
    result: VisitResult
    summary: str = ""
    region: Optional[str] = None
    cnpj: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(slots=True)
class Notification:
    id: str
    message: str
    timestamp: str
    read: bool = False
    type: Literal["visit"] = "visit"
