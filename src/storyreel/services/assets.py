"""Asset resolution: turn asset references into local files."""

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests

from ..config import config
from ..errors import AssetResolutionError, MissingAssetError
from ..models.asset import AssetRef, EmbeddedAsset, LocalAsset, RemoteAsset

logger = logging.getLogger(__name__)

# mimetypes gaps on some platforms
_EXTENSION_OVERRIDES = {
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "application/x-subrip": ".srt",
    "text/srt": ".srt",
}


def extension_for_media_type(media_type: Optional[str], default: str = ".bin") -> str:
    """Map a media type to a file extension."""
    if not media_type:
        return default
    base = media_type.split(";")[0].strip().lower()
    return _EXTENSION_OVERRIDES.get(base) or mimetypes.guess_extension(base) or default


@dataclass(frozen=True)
class ResolvedAsset:
    """A local file backing an asset reference."""

    path: Path
    temporary: bool = False

    def cleanup(self) -> None:
        """Delete the file if the resolver created it."""
        if self.temporary:
            self.path.unlink(missing_ok=True)


class AssetResolver:
    """Materializes local, remote and embedded assets as local files.

    This client handles:
    - Local paths, checked for existence
    - HTTP(S) downloads streamed to disk
    - Data URIs decoded to disk
    """

    DEFAULT_CHUNK_SIZE = 64 * 1024

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            session: HTTP session to reuse. A new one is created if omitted.
            timeout: Download timeout in seconds. Defaults to config.
        """
        self._session = session or requests.Session()
        self._timeout = timeout or config.download_timeout

    def resolve(
        self,
        ref: AssetRef,
        dest_dir: Path,
        stem: str,
        scene_id: Optional[str] = None,
    ) -> ResolvedAsset:
        """Resolve a reference to a local file.

        Args:
            ref: Asset reference.
            dest_dir: Directory for downloaded/decoded files.
            stem: Filename stem for downloaded/decoded files.
            scene_id: Scene identifier used in error messages.

        Returns:
            ResolvedAsset pointing at a local file.

        Raises:
            MissingAssetError: If a local file does not exist.
            AssetResolutionError: If a download or decode fails.
        """
        if isinstance(ref, LocalAsset):
            return self._resolve_local(ref, scene_id)
        if isinstance(ref, RemoteAsset):
            return self._download(ref, dest_dir, stem, scene_id)
        if isinstance(ref, EmbeddedAsset):
            return self._write_embedded(ref, dest_dir, stem)
        raise TypeError(f"Unsupported asset reference: {type(ref).__name__}")

    def _resolve_local(self, ref: LocalAsset, scene_id: Optional[str]) -> ResolvedAsset:
        if not ref.path.is_file():
            raise MissingAssetError(scene_id, ref.path)
        return ResolvedAsset(path=ref.path)

    def _download(
        self,
        ref: RemoteAsset,
        dest_dir: Path,
        stem: str,
        scene_id: Optional[str],
    ) -> ResolvedAsset:
        dest_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Downloading {ref.url}")

        path: Optional[Path] = None
        try:
            with self._session.get(ref.url, stream=True, timeout=self._timeout) as response:
                response.raise_for_status()
                suffix = Path(urlparse(ref.url).path).suffix.lower()
                if not suffix:
                    suffix = extension_for_media_type(response.headers.get("Content-Type"))
                path = dest_dir / f"{stem}{suffix}"
                with open(path, "wb") as f:
                    for chunk in response.iter_content(chunk_size=self.DEFAULT_CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException as e:
            if path is not None:
                path.unlink(missing_ok=True)
            where = f" for scene '{scene_id}'" if scene_id else ""
            raise AssetResolutionError(f"Failed to download {ref.url}{where}: {e}") from e

        logger.debug(f"Downloaded {ref.url} -> {path} ({path.stat().st_size} bytes)")
        return ResolvedAsset(path=path, temporary=True)

    def _write_embedded(self, ref: EmbeddedAsset, dest_dir: Path, stem: str) -> ResolvedAsset:
        if not ref.data:
            raise AssetResolutionError(f"Embedded asset '{stem}' is empty")

        dest_dir.mkdir(parents=True, exist_ok=True)
        path = dest_dir / f"{stem}{extension_for_media_type(ref.media_type)}"
        path.write_bytes(ref.data)
        logger.debug(f"Decoded embedded {ref.media_type} -> {path} ({len(ref.data)} bytes)")
        return ResolvedAsset(path=path, temporary=True)
