"""Tests for ordered segment concatenation."""

from pathlib import Path

import pytest

from storyreel.editor import SegmentConcatenator, concat_list_file, render_concat_list
from storyreel.errors import ConcatenationError


@pytest.fixture
def segments(tmp_path):
    paths = []
    for name in ["c_intro", "a_middle", "b_outro"]:
        path = tmp_path / f"{name}.mp4"
        path.write_bytes(b"segment")
        paths.append(path)
    return paths


@pytest.fixture
def concatenator(tmp_path):
    return SegmentConcatenator(work_dir=tmp_path / "work")


def _list_path(args):
    return args[args.index("-i") + 1]


def test_render_concat_list_keeps_order(segments):
    assert render_concat_list(segments) == "".join(f"file '{path.as_posix()}'\n" for path in segments)


def test_concat_list_file_is_removed(tmp_path, segments):
    with concat_list_file(segments, tmp_path) as list_path:
        assert list_path.read_text(encoding="utf-8") == render_concat_list(segments)
    assert not list_path.exists()


def test_stream_copy_success(concatenator, segments, tmp_path, ffmpeg_recorder):
    listed = []
    ffmpeg_recorder.on_call = lambda args: listed.append(Path(_list_path(args)).read_text(encoding="utf-8"))
    output = tmp_path / "out" / "final.mp4"

    result = concatenator.concatenate(segments, output)

    assert result == output
    assert output.read_bytes() == b"video"
    assert len(ffmpeg_recorder.calls) == 1
    args = ffmpeg_recorder.calls[0]
    assert args[:5] == ["-y", "-f", "concat", "-safe", "0"]
    assert args[args.index("-c") + 1] == "copy"
    assert listed == [render_concat_list(segments)]
    assert list((tmp_path / "work").glob("concat_*.txt")) == []


def test_falls_back_to_reencode(concatenator, segments, tmp_path, ffmpeg_recorder):
    ffmpeg_recorder.fail_next("Non-monotonous DTS in output stream")
    output = tmp_path / "final.mp4"

    concatenator.concatenate(segments, output)

    assert len(ffmpeg_recorder.calls) == 2
    copy_args, reencode_args = ffmpeg_recorder.calls
    assert _list_path(copy_args) == _list_path(reencode_args)
    assert "copy" not in reencode_args
    assert reencode_args[reencode_args.index("-c:v") + 1] == "libx264"
    assert reencode_args[reencode_args.index("-c:a") + 1] == "aac"
    assert output.read_bytes() == b"video"
    assert list((tmp_path / "work").glob("concat_*.txt")) == []


def test_both_attempts_fail(concatenator, segments, tmp_path, ffmpeg_recorder):
    ffmpeg_recorder.fail_next("copy failed", "encoder exploded")
    output = tmp_path / "final.mp4"

    with pytest.raises(ConcatenationError) as exc_info:
        concatenator.concatenate(segments, output)

    assert "encoder exploded" in str(exc_info.value)
    assert not output.exists()
    assert list((tmp_path / "work").glob("concat_*.txt")) == []


def test_missing_input_fails_before_encoding(concatenator, segments, tmp_path, ffmpeg_recorder):
    segments[1].unlink()

    with pytest.raises(ConcatenationError) as exc_info:
        concatenator.concatenate(segments, tmp_path / "final.mp4")

    assert "a_middle.mp4" in str(exc_info.value)
    assert ffmpeg_recorder.calls == []


def test_empty_input(concatenator, tmp_path, ffmpeg_recorder):
    with pytest.raises(ConcatenationError):
        concatenator.concatenate([], tmp_path / "final.mp4")
    assert ffmpeg_recorder.calls == []


def test_list_defaults_to_output_directory(segments, tmp_path, ffmpeg_recorder):
    output = tmp_path / "out" / "final.mp4"

    SegmentConcatenator().concatenate(segments, output)

    assert _list_path(ffmpeg_recorder.calls[0]).startswith(str(output.parent))
