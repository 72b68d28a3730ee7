"""Application layer - state machine and background refresh."""

from .app_state import AppState
from .refresh_pipeline import RefreshPipeline
from .snapshot_channel import SnapshotChannel
from .view_state import InputMode, Tab, ViewState

__all__ = [
    "AppState",
    "RefreshPipeline",
    "SnapshotChannel",
    "InputMode",
    "Tab",
    "ViewState",
]
