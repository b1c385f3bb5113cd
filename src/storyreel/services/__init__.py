"""External asset integrations."""

from .assets import AssetResolver, ResolvedAsset, extension_for_media_type

__all__ = [
    "AssetResolver",
    "ResolvedAsset",
    "extension_for_media_type",
]
