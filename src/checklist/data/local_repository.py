"""Visits and users kept in the legacy embedded SQLite store."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional

from ..db.sqlite import get_db_connection, initialize_database
from ..errors import NotFoundError, ValidationError
from ..models.domain import Client, NewVisit, UserProfile, Visit
from .rows import (
    normalize_client_type,
    normalize_role,
    normalize_visit_result,
    normalize_visit_type,
    parse_coordinate,
    parse_details,
)

logger = logging.getLogger(__name__)

_VISIT_SELECT = """
    SELECT v.*, u.name AS user_name, c.name AS client_name, c.cnpj AS cnpj, c.region AS region
    FROM visits v
    LEFT JOIN users u ON v.user_id = u.id
    LEFT JOIN clients c ON v.client_id = c.id
"""

_PROFILE_COLUMNS = {"name", "role", "active", "phone", "avatar_url"}


def _to_local_id(value: str | int | None) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Local store ids are integers, got '{value}'") from exc


def _visit_from_local_row(row: sqlite3.Row) -> Visit:
    keys = row.keys()
    return Visit(
        id=str(row["id"]),
        user_id=str(row["user_id"]) if row["user_id"] is not None else "",
        user_name=row["user_name"] or "",
        client_name=row["client_name"] or "",
        client_type=normalize_client_type(row["client_type"] if "client_type" in keys else None),
        date=row["date"] or "",
        type=normalize_visit_type(row["type"]),
        result=normalize_visit_result(row["result"]),
        summary=row["summary"] or "",
        region=row["region"],
        cnpj=row["cnpj"],
        details=parse_details(row["details"] if "details" in keys else None),
        latitude=parse_coordinate(row["latitude"], "latitude") if "latitude" in keys else None,
        longitude=parse_coordinate(row["longitude"], "longitude") if "longitude" in keys else None,
        raw=dict(row),
    )


def _profile_from_local_row(row: sqlite3.Row) -> UserProfile:
    return UserProfile(
        id=str(row["id"]),
        name=row["name"] or "",
        email=row["email"] or "",
        role=normalize_role(row["role"]),
        active=bool(row["active"]) if row["active"] is not None else True,
        phone=row["phone"],
        avatar_url=row["avatar_url"],
    )


class _LocalStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        initialize_database(path)

    def _connect(self) -> sqlite3.Connection:
        return get_db_connection(self.path)


class LocalVisitRepository(_LocalStore):
    has_change_feed = False

    def list_visits(
        self,
        *,
        user_id: Optional[str] = None,
        since: Optional[str] = None,
        until: Optional[str] = None,
        descending: bool = True,
    ) -> list[Visit]:
        clauses: list[str] = []
        params: list[Any] = []
        if user_id:
            clauses.append("v.user_id = ?")
            params.append(_to_local_id(user_id))
        if since:
            clauses.append("v.date >= ?")
            params.append(since)
        if until:
            clauses.append("v.date <= ?")
            params.append(until)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        direction = "DESC" if descending else "ASC"
        conn = self._connect()
        try:
            rows = conn.execute(f"{_VISIT_SELECT} {where} ORDER BY v.date {direction}, v.id {direction}", params).fetchall()
        finally:
            conn.close()
        return [_visit_from_local_row(row) for row in rows]

    def get_visit(self, visit_id: str) -> Optional[Visit]:
        conn = self._connect()
        try:
            row = conn.execute(f"{_VISIT_SELECT} WHERE v.id = ?", (_to_local_id(visit_id),)).fetchone()
        finally:
            conn.close()
        return _visit_from_local_row(row) if row else None

    def create_visit(self, visit: NewVisit) -> Visit:
        conn = self._connect()
        try:
            client = self._find_or_create_client(conn, visit)
            cursor = conn.execute(
                """
                INSERT INTO visits (user_id, client_id, date, type, result, summary, client_type, details, latitude, longitude)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    _to_local_id(visit.user_id) or 1,
                    client.id,
                    visit.date,
                    visit.type,
                    visit.result,
                    visit.summary,
                    visit.client_type,
                    json.dumps(visit.details, ensure_ascii=False),
                    visit.latitude,
                    visit.longitude,
                ),
            )
            conn.commit()
            visit_id = cursor.lastrowid
        finally:
            conn.close()
        created = self.get_visit(str(visit_id))
        if created is None:
            raise NotFoundError(f"Visit {visit_id} vanished after insert")
        if not created.user_name:
            created.user_name = visit.user_name
        return created

    @staticmethod
    def _find_or_create_client(conn: sqlite3.Connection, visit: NewVisit) -> Client:
        row = conn.execute(
            "SELECT id, name, cnpj, region, client_type FROM clients WHERE name = ?", (visit.client_name,)
        ).fetchone()
        if row:
            return Client(
                id=row["id"],
                name=row["name"],
                cnpj=row["cnpj"],
                region=row["region"],
                client_type=normalize_client_type(row["client_type"]),
            )
        logger.info(f"Registering new client '{visit.client_name}' in local store")
        cursor = conn.execute(
            "INSERT INTO clients (name, cnpj, region, client_type) VALUES (?, ?, ?, ?)",
            (visit.client_name, visit.cnpj, visit.region, visit.client_type),
        )
        return Client(
            id=cursor.lastrowid,
            name=visit.client_name,
            cnpj=visit.cnpj,
            region=visit.region,
            client_type=visit.client_type,
        )

    def count_visits(self, *, user_id: str, since: str, until: str) -> int:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT COUNT(*) AS count FROM visits WHERE user_id = ? AND date >= ? AND date <= ?",
                (_to_local_id(user_id), since, until),
            ).fetchone()
        finally:
            conn.close()
        return row["count"]


class LocalProfileRepository(_LocalStore):
    def list_profiles(self) -> list[UserProfile]:
        conn = self._connect()
        try:
            rows = conn.execute("SELECT * FROM users ORDER BY name").fetchall()
        finally:
            conn.close()
        return [_profile_from_local_row(row) for row in rows]

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (_to_local_id(user_id),)).fetchone()
        finally:
            conn.close()
        return _profile_from_local_row(row) if row else None

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> UserProfile:
        unknown = set(changes) - _PROFILE_COLUMNS
        if unknown:
            raise ValueError(f"Profile attribute(s) {sorted(unknown)} cannot be updated")
        values = dict(changes)
        if "role" in values and isinstance(values["role"], str):
            values["role"] = values["role"].upper()
        if "active" in values:
            values["active"] = 1 if values["active"] else 0
        if values:
            assignments = ", ".join(f"{column} = ?" for column in values)
            conn = self._connect()
            try:
                conn.execute(
                    f"UPDATE users SET {assignments} WHERE id = ?",
                    (*values.values(), _to_local_id(user_id)),
                )
                conn.commit()
            finally:
                conn.close()
        profile = self.get_profile(user_id)
        if profile is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return profile

    def delete_profile(self, user_id: str) -> None:
        conn = self._connect()
        try:
            conn.execute("DELETE FROM users WHERE id = ?", (_to_local_id(user_id),))
            conn.commit()
        finally:
            conn.close()
