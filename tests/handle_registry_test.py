import concurrent.futures as cf

import pytest

import HandleRegistry as registry_module
from HandleRegistry import HandleRegistry
from VideoInfo import VideoHandle
from video_errors import FileNotFound, LockError
from video_probe import probe


@pytest.fixture()
def registry():
    return HandleRegistry(lock_timeout=0.05)


def test_open_registers_snapshot(registry, sample_video):
    handle_id = registry.open(sample_video)

    assert handle_id.startswith("video_")
    handle = registry.get(handle_id)
    assert isinstance(handle, VideoHandle)
    assert handle.path == str(sample_video)
    assert handle.info == probe(sample_video)
    assert handle.stream_index == 0
    assert handle.time_base > 0


def test_open_missing_file_is_file_not_found(registry, tmp_path):
    with pytest.raises(FileNotFound):
        registry.open(tmp_path / "nope.mp4")
    assert len(registry) == 0


def test_ids_are_unique_for_same_path(registry, sample_video):
    first = registry.open(sample_video)
    second = registry.open(sample_video)
    assert first != second
    assert len(registry) == 2


def test_handles_are_immutable(registry, sample_video):
    handle = registry.get(registry.open(sample_video))
    with pytest.raises(AttributeError):
        handle.path = "other.mp4"


def test_close_removes_handle(registry, sample_video):
    handle_id = registry.open(sample_video)
    registry.close(handle_id)
    assert registry.get(handle_id) is None
    assert handle_id not in registry


def test_close_unknown_id_is_noop(registry):
    registry.close("video_never_opened")
    registry.close("video_never_opened")
    assert len(registry) == 0


def test_concurrent_opens_of_same_file(registry, sample_video):
    with cf.ThreadPoolExecutor(max_workers=8) as ex:
        ids = list(ex.map(lambda _: registry.open(sample_video), range(16)))

    assert len(set(ids)) == 16
    assert len(registry) == 16
    for handle_id in ids:
        assert registry.get(handle_id).info.width > 0


def test_lock_timeout_raises_lock_error_without_touching_map(registry, sample_video):
    handle_id = registry.open(sample_video)

    registry._lock.acquire()
    try:
        with pytest.raises(LockError):
            registry.close(handle_id)
        with pytest.raises(LockError):
            registry.get(handle_id)
    finally:
        registry._lock.release()

    assert registry.get(handle_id) is not None
    assert len(registry) == 1


def test_module_level_functions_use_default_registry(sample_video):
    before = registry_module.handle_count()
    handle_id = registry_module.open_video(sample_video)
    try:
        assert registry_module.get_handle(handle_id).path == str(sample_video)
        assert registry_module.handle_count() == before + 1
        assert registry_module.default_registry() is registry_module.default_registry()
    finally:
        registry_module.close_video(handle_id)
    assert registry_module.get_handle(handle_id) is None
