"""Dashboard API schemas."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel


class SalespersonRankModel(BaseModel):
    name: str
    visits: int
    percent: float


class RegionRankModel(BaseModel):
    name: str
    value: int
    percent: float


class DailyBucketModel(BaseModel):
    date: str
    label: str
    value: float
    count: int
    isToday: bool


class DashboardStatsResponse(BaseModel):
    totalVisits: int
    uniqueClients: int
    opportunities: int
    topAssessores: List[SalespersonRankModel]
    topRegions: List[RegionRankModel]
    visitsByPeriod: List[DailyBucketModel]
