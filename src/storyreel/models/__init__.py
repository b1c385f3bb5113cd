"""Data models for the scene video pipeline."""

from .scene import SceneInput
from .subtitle import SubtitleCue
from .segment import SceneVideoSegment, FinalVideo
from .manifest import Manifest
from .project import RenderRun, RunState
from .asset import (
    AssetRef,
    LocalAsset,
    RemoteAsset,
    EmbeddedAsset,
    parse_asset_location,
    parse_data_uri,
)

__all__ = [
    "SceneInput",
    "SubtitleCue",
    "SceneVideoSegment",
    "FinalVideo",
    "Manifest",
    "RenderRun",
    "RunState",
    "AssetRef",
    "LocalAsset",
    "RemoteAsset",
    "EmbeddedAsset",
    "parse_asset_location",
    "parse_data_uri",
]
