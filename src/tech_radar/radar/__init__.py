"""Radar records, defaults, persistence and CSV import."""

from tech_radar.radar.csv_import import (
    BlipDraft,
    CsvImportError,
    CsvImportResult,
    build_sample_csv,
    parse_blip_csv,
)
from tech_radar.radar.defaults import DEFAULT_QUADRANTS, DEFAULT_RINGS, random_offsets
from tech_radar.radar.models import Blip, Quadrant, Radar, Ring, User
from tech_radar.radar.storage import RadarStorage

__all__ = [
    "DEFAULT_QUADRANTS",
    "DEFAULT_RINGS",
    "Blip",
    "BlipDraft",
    "CsvImportError",
    "CsvImportResult",
    "Quadrant",
    "Radar",
    "RadarStorage",
    "Ring",
    "User",
    "build_sample_csv",
    "parse_blip_csv",
    "random_offsets",
]
