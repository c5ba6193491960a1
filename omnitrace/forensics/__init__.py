"""Forensic reconstruction of past time windows."""

from .reconstruct import ForensicReconstruction, TimeGap, find_gaps, reconstruct_timeline


__all__ = ["ForensicReconstruction", "TimeGap", "find_gaps", "reconstruct_timeline"]
