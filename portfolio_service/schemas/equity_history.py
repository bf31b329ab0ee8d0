"""Pydantic schemas for the equity history API."""

from pydantic import BaseModel, ConfigDict, Field


class EquityHistoryPoint(BaseModel):
    timestamp: int
    equity: float


class EquityHistory(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    points: list[EquityHistoryPoint] = Field(default_factory=list)
    bucket_ms: int = Field(alias="bucketMs")
    from_ts: int = Field(alias="fromTs")
    to_ts: int = Field(alias="toTs")
