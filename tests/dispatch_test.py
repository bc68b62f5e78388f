import concurrent.futures as cf

import pytest

from HandleRegistry import HandleRegistry
from conftest import HEIGHT, WIDTH, mean_level
from dispatch import COMMAND_NAMES, FrameCommands


@pytest.fixture()
def commands():
    with FrameCommands(max_workers=2, registry=HandleRegistry()) as cmds:
        yield cmds


def test_extraction_runs_on_pool(commands, sample_video):
    future = commands.get_frame_at_time(sample_video, 1.5)
    assert isinstance(future, cf.Future)
    assert mean_level(future.result(timeout=30)) == pytest.approx(120, abs=4)


def test_parallel_extractions_are_independent(commands, sample_video):
    futures = [commands.get_frame_at_time_with_quality(sample_video, t, 90) for t in (0.0, 1.0, 2.0)]
    levels = [mean_level(f.result(timeout=30)) for f in futures]
    assert levels == pytest.approx([0, 80, 160], abs=4)


def test_thumbnail_commands_return_futures(commands, ten_second_video):
    assert len(commands.generate_thumbnails(ten_second_video, 4.0).result(timeout=30)) == 3
    assert len(commands.generate_thumbnails_with_options(ten_second_video, 1.0, 50, 4).result(timeout=30)) == 4
    assert commands.get_first_frame(ten_second_video).result(timeout=30)
    assert commands.get_thumbnail_at_percent(ten_second_video, 50).result(timeout=30)


def test_run_command_wraps_video_info(commands, sample_video):
    envelope = commands.run_command("get_video_info", path=str(sample_video))
    assert envelope["ok"] is True
    assert envelope["result"]["width"] == WIDTH
    assert envelope["result"]["height"] == HEIGHT
    assert envelope["result"]["codec"] == "mpeg4"


def test_run_command_open_and_close(commands, sample_video):
    opened = commands.run_command("open_video", path=str(sample_video))
    handle_id = opened["result"]
    assert opened["ok"] is True
    assert handle_id in commands.registry

    assert commands.run_command("close_video", handle_id=handle_id) == {"ok": True, "result": None}
    assert commands.run_command("close_video", handle_id=handle_id) == {"ok": True, "result": None}
    assert handle_id not in commands.registry


def test_run_command_waits_for_future(commands, sample_video):
    envelope = commands.run_command("get_frame_at_time", path=str(sample_video), timestamp_secs=0.0)
    assert envelope["ok"] is True
    assert isinstance(envelope["result"], str)


def test_run_command_reports_errors(commands, tmp_path):
    missing = str(tmp_path / "missing.mp4")

    assert commands.run_command("open_video", path=missing)["error"]["code"] == "FILE_NOT_FOUND"

    envelope = commands.run_command("get_frame_at_time", path=missing, timestamp_secs=1.0)
    assert envelope["ok"] is False
    assert envelope["error"]["code"] == "OPEN_ERROR"
    assert missing in envelope["error"]["message"]


def test_run_command_reports_bad_interval(commands, sample_video):
    envelope = commands.run_command("generate_thumbnails", path=str(sample_video), interval_secs=0.0)
    assert envelope["ok"] is False
    assert envelope["error"]["code"] == "INVALID_ARGUMENT"


def test_unknown_command(commands):
    envelope = commands.run_command("render_timeline")
    assert envelope == {
        "ok": False,
        "error": {"code": "UNKNOWN_COMMAND", "message": "Unknown command: render_timeline"},
    }


def test_every_command_name_is_a_method():
    for name in COMMAND_NAMES:
        assert callable(getattr(FrameCommands, name))
