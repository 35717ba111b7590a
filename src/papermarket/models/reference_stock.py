"""Curated reference metadata model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReferenceStock:
    """Static name/sector/description for a featured ticker."""

    symbol: str
    name: str
    sector: str
    description: str
