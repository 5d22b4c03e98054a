"""I/O layer: output paths, Arrow schemas, and snapshot files."""

from infection_sim.io.paths import resolve_within_base
from infection_sim.io.snapshots import load_snapshot, save_snapshot

__all__ = [
    "load_snapshot",
    "resolve_within_base",
    "save_snapshot",
]
