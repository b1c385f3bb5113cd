"""Asset reference variants.

A caller describes each asset with a location string. The string is
classified exactly once, at the pipeline boundary, into one of three
references; everything downstream works with these types instead of
inspecting string prefixes.
"""

import base64
import binascii
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote, unquote_to_bytes, urlparse

DEFAULT_MEDIA_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class LocalAsset:
    """File already present on the local filesystem."""

    path: Path


@dataclass(frozen=True)
class RemoteAsset:
    """File to download over HTTP(S)."""

    url: str


@dataclass(frozen=True)
class EmbeddedAsset:
    """File content carried inline in a data URI."""

    media_type: str
    data: bytes


AssetRef = Union[LocalAsset, RemoteAsset, EmbeddedAsset]


def parse_data_uri(uri: str) -> EmbeddedAsset:
    """Decode a ``data:`` URI.

    Args:
        uri: URI of the form ``data:[<media type>][;base64],<payload>``.

    Returns:
        EmbeddedAsset with the decoded bytes.

    Raises:
        ValueError: If the URI is malformed or the base64 payload is invalid.
    """
    if not uri.startswith("data:"):
        raise ValueError(f"Not a data URI: {uri[:32]}")

    header, sep, payload = uri[len("data:"):].partition(",")
    if not sep:
        raise ValueError("Data URI has no ',' separating header and payload")

    params = [part.strip() for part in header.split(";") if part.strip()]
    is_base64 = bool(params) and params[-1].lower() == "base64"
    if is_base64:
        params = params[:-1]

    media_type = DEFAULT_MEDIA_TYPE
    if params and "/" in params[0]:
        media_type = params[0].lower()

    if is_base64:
        try:
            data = base64.b64decode(payload, validate=False)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 payload in data URI: {e}") from e
    else:
        data = unquote_to_bytes(payload)

    return EmbeddedAsset(media_type=media_type, data=data)


def parse_asset_location(location: str, root: Optional[Path] = None) -> AssetRef:
    """Classify a caller-supplied location string.

    Args:
        location: Local path, ``file://`` URI, HTTP(S) URL or data URI.
        root: Base directory for relative local paths. Defaults to the
            current working directory.

    Returns:
        The matching asset reference.

    Raises:
        ValueError: If the location is empty or an unsupported URL scheme.
    """
    if not location or not location.strip():
        raise ValueError("Asset location cannot be empty")

    location = location.strip()
    lowered = location.lower()

    if lowered.startswith("data:"):
        return parse_data_uri(location)

    if lowered.startswith(("http://", "https://")):
        return RemoteAsset(url=location)

    if lowered.startswith("file://"):
        return LocalAsset(path=Path(unquote(urlparse(location).path)))

    scheme = urlparse(location).scheme
    # Single-letter schemes are Windows drive letters
    if scheme and len(scheme) > 1:
        raise ValueError(f"Unsupported asset location scheme '{scheme}': {location}")

    path = Path(location).expanduser()
    if not path.is_absolute():
        path = (root or Path.cwd()) / path
    return LocalAsset(path=path)
