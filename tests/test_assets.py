"""Tests for asset location parsing and resolution."""

import base64
from pathlib import Path

import pytest
import requests

from storyreel.errors import AssetResolutionError, MissingAssetError
from storyreel.models import EmbeddedAsset, LocalAsset, RemoteAsset, parse_asset_location, parse_data_uri
from storyreel.services import AssetResolver, extension_for_media_type


class FakeResponse:
    def __init__(self, chunks, headers=None, error=None):
        self._chunks = chunks
        self.headers = headers or {}
        self._error = error

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self._error is not None:
            raise self._error

    def iter_content(self, chunk_size=1):
        for chunk in self._chunks:
            if isinstance(chunk, Exception):
                raise chunk
            yield chunk


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, stream=False, timeout=None):
        self.requests.append((url, stream, timeout))
        if self.error is not None:
            raise self.error
        return self.response


class TestParseAssetLocation:
    def test_relative_path_resolves_against_root(self, tmp_path):
        ref = parse_asset_location("media/a.wav", root=tmp_path)
        assert ref == LocalAsset(path=tmp_path / "media" / "a.wav")

    def test_absolute_path(self, tmp_path):
        target = tmp_path / "a.png"
        assert parse_asset_location(str(target)) == LocalAsset(path=target)

    def test_file_uri(self):
        ref = parse_asset_location("file:///tmp/my%20clip.wav")
        assert ref == LocalAsset(path=Path("/tmp/my clip.wav"))

    @pytest.mark.parametrize("url", ["https://cdn.example.com/a.mp3", "HTTP://example.com/b.png"])
    def test_http_urls_are_remote(self, url):
        assert parse_asset_location(url) == RemoteAsset(url=url)

    def test_base64_data_uri(self):
        payload = base64.b64encode(b"\x00\x01audio").decode()
        ref = parse_asset_location(f"data:audio/mpeg;base64,{payload}")
        assert ref == EmbeddedAsset(media_type="audio/mpeg", data=b"\x00\x01audio")

    def test_percent_encoded_data_uri_defaults_media_type(self):
        assert parse_data_uri("data:,hello%20world") == EmbeddedAsset(
            media_type="application/octet-stream",
            data=b"hello world",
        )

    def test_data_uri_without_separator(self):
        with pytest.raises(ValueError):
            parse_data_uri("data:text/plain;base64")

    @pytest.mark.parametrize("location", ["", "   ", "ftp://example.com/a.wav", "s3://bucket/key.png"])
    def test_rejects_empty_and_unsupported(self, location):
        with pytest.raises(ValueError):
            parse_asset_location(location)


class TestAssetResolver:
    def test_local_file_is_not_temporary(self, tmp_path):
        path = tmp_path / "image.png"
        path.write_bytes(b"png")

        resolved = AssetResolver(session=FakeSession()).resolve(LocalAsset(path), tmp_path / "dl", "x")

        assert resolved.path == path
        assert not resolved.temporary
        resolved.cleanup()
        assert path.exists()

    def test_missing_local_file_names_scene_and_path(self, tmp_path):
        missing = tmp_path / "gone.wav"
        resolver = AssetResolver(session=FakeSession())

        with pytest.raises(MissingAssetError) as exc_info:
            resolver.resolve(LocalAsset(missing), tmp_path, "x", scene_id="intro")

        assert exc_info.value.scene_id == "intro"
        assert "intro" in str(exc_info.value)
        assert str(missing) in str(exc_info.value)

    def test_embedded_asset_is_written_and_cleaned_up(self, tmp_path):
        ref = EmbeddedAsset(media_type="image/png", data=b"\x89PNG")
        resolved = AssetResolver(session=FakeSession()).resolve(ref, tmp_path / "assets", "scene1_image")

        assert resolved.path == tmp_path / "assets" / "scene1_image.png"
        assert resolved.path.read_bytes() == b"\x89PNG"
        assert resolved.temporary

        resolved.cleanup()
        assert not resolved.path.exists()

    def test_empty_embedded_asset_fails(self, tmp_path):
        with pytest.raises(AssetResolutionError):
            AssetResolver(session=FakeSession()).resolve(
                EmbeddedAsset(media_type="audio/wav", data=b""), tmp_path, "a"
            )

    def test_download_uses_url_suffix(self, tmp_path):
        session = FakeSession(FakeResponse([b"ab", b"", b"cd"]))
        resolver = AssetResolver(session=session, timeout=5)

        resolved = resolver.resolve(RemoteAsset("https://example.com/x/voice.MP3?sig=1"), tmp_path, "s_audio")

        assert resolved.path == tmp_path / "s_audio.mp3"
        assert resolved.path.read_bytes() == b"abcd"
        assert resolved.temporary
        assert session.requests == [("https://example.com/x/voice.MP3?sig=1", True, 5)]

    def test_download_falls_back_to_content_type(self, tmp_path):
        session = FakeSession(FakeResponse([b"img"], headers={"Content-Type": "image/jpeg; charset=binary"}))

        resolved = AssetResolver(session=session).resolve(RemoteAsset("https://example.com/render"), tmp_path, "img")

        assert resolved.path.name == "img.jpg"

    def test_connection_error_becomes_resolution_error(self, tmp_path):
        session = FakeSession(error=requests.ConnectionError("refused"))

        with pytest.raises(AssetResolutionError) as exc_info:
            AssetResolver(session=session).resolve(
                RemoteAsset("https://example.com/a.wav"), tmp_path, "a", scene_id="s2"
            )

        assert "s2" in str(exc_info.value)

    def test_http_error_status(self, tmp_path):
        response = FakeResponse([b"nope"], error=requests.HTTPError("404 Client Error"))

        with pytest.raises(AssetResolutionError):
            AssetResolver(session=FakeSession(response)).resolve(RemoteAsset("https://example.com/a.wav"), tmp_path, "a")

    def test_interrupted_download_leaves_no_partial_file(self, tmp_path):
        response = FakeResponse([b"half", requests.ConnectionError("reset")])

        with pytest.raises(AssetResolutionError):
            AssetResolver(session=FakeSession(response)).resolve(RemoteAsset("https://example.com/a.wav"), tmp_path, "a")

        assert not (tmp_path / "a.wav").exists()


@pytest.mark.parametrize(
    "media_type, expected",
    [("audio/mpeg", ".mp3"), ("image/png", ".png"), ("IMAGE/JPEG", ".jpg"), (None, ".bin"), ("x-unknown/zzz", ".bin")],
)
def test_extension_for_media_type(media_type, expected):
    assert extension_for_media_type(media_type) == expected
