"""Parquet schema definitions for run artifacts.

All Arrow schemas used for persisting trajectory logs and census timelines
are centralised here so that the driver and the renderers work against the
same column contracts.
"""

from __future__ import annotations

import pyarrow as pa

# ---------------------------------------------------------------------------
# Schema version constants
# ---------------------------------------------------------------------------

RUN_SUMMARY_SCHEMA_VERSION = 1

# ---------------------------------------------------------------------------
# Per-step agent rows
# ---------------------------------------------------------------------------

TRAJECTORY_SCHEMA = pa.schema(
    [
        ("step", pa.int64()),
        ("time", pa.float64()),
        ("agent_id", pa.int64()),
        ("x", pa.float64()),
        ("y", pa.float64()),
        ("health", pa.string()),
        ("immunity", pa.string()),
        ("symptom", pa.string()),
        ("state", pa.string()),
    ]
)

# ---------------------------------------------------------------------------
# Per-second population census
# ---------------------------------------------------------------------------

CENSUS_COUNT_NAMES = [
    "remaining",
    "total",
    "healthy",
    "infected",
    "immune",
    "exited",
]

CENSUS_SCHEMA = pa.schema(
    [
        ("step", pa.int64()),
        ("time", pa.float64()),
    ]
    + [(name, pa.int64()) for name in CENSUS_COUNT_NAMES]
)
