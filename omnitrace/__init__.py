"""
OMNITRACE - Local activity timeline and focus analytics

Everything is derived on-device from one append-only event log:

    Event Log → Segmentation Engine → {Smart Merging, Analytics}
              → {Forensic Reconstruction, OMNIBRAIN assistant}

Components:
    models.py: Events, sessions, segments and merged segments
    engine/: Segment derivation, point-in-time lookup, event queries
    analytics/: Smart merging, metrics, focus score, heatmap, insights,
        drift detection, daily summary, titles
    forensics/: Auditable reconstruction of an arbitrary time window
    omnibrain/: Intent detection, fact templates, style rendering and
        static knowledge-base search
    search/: Composable event filters and presets
    storage/: Event store interface with SQLite and in-memory backends
    session/: Session lifecycle, idle detection and startup recovery
    privacy/: JSON/CSV export, full wipe and Private Mode masking
    instrumentation/: Event logging helpers
    cli.py: The `omnitrace` command

Usage:
    from omnitrace.engine.time_engine import derive_segments
    from omnitrace.analytics.focus_score import compute_focus_score

    segments = derive_segments(events)
    score = compute_focus_score(events)

Configuration: args/omnitrace.yaml
Database: data/omnitrace.db
"""

from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
ARGS_DIR = PROJECT_ROOT / "args"
CONFIG_PATH = ARGS_DIR / "omnitrace.yaml"
DB_PATH = DATA_DIR / "omnitrace.db"
CHAT_HISTORY_PATH = DATA_DIR / "omnibrain_chat.json"

__version__ = "0.1.0"

__all__ = [
    "PROJECT_ROOT",
    "DATA_DIR",
    "ARGS_DIR",
    "CONFIG_PATH",
    "DB_PATH",
    "CHAT_HISTORY_PATH",
    "__version__",
]
