"""Local export and wipe utilities."""

from .export import export_to_csv, export_to_json
from .private_mode import mask_label, redact
from .wipe import wipe_all_data, wipe_all_data_for_recovery


__all__ = ["export_to_csv", "export_to_json", "mask_label", "redact", "wipe_all_data", "wipe_all_data_for_recovery"]
