# test/test_cli.py
import numpy as np
import pytest
from scipy.io import savemat

from mat2nwb.cli import (
    EXIT_CANCELLED,
    EXIT_FAILURE,
    EXIT_OK,
    EXIT_USAGE,
    confirm_overwrite,
    main,
    render_skip,
)
from mat2nwb.core import ChannelRecord, ClassificationSkipped, classify_record


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "mouse1_VLS_42_control.mat"
    savemat(path, {
        "expA_ChR2": {"times": np.arange(5) * 0.1, "values": np.arange(5.0)},
        "expA_Notes": {"title": "free text"},
    })
    return path


def never_asked(prompt):
    raise AssertionError("unexpected prompt")


def test_success(source, tmp_path, caplog):
    rc = main([str(source), "VLS session", "Ada", "-o", str(tmp_path)], ask=never_asked)
    assert rc == EXIT_OK
    assert (tmp_path / "mouse1_VLS_42_control.nwb").exists()
    assert "STATUS: SKIPPED" in caplog.text


def test_epoch_timestamps_convert(tmp_path):
    path = tmp_path / "mouse1_VLS_42_control.mat"
    savemat(path, {"expA_ChR2": {"times": 1.7e12 + np.arange(10.0), "values": np.arange(10.0)}})
    out = tmp_path / "out"
    assert main([str(path), "-o", str(out)], ask=never_asked) == EXIT_OK
    assert (out / "mouse1_VLS_42_control.nwb").exists()


def test_missing_argument():
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == EXIT_USAGE


def test_missing_source(tmp_path):
    rc = main([str(tmp_path / "mouse1_VLS_42_control.mat"), "-o", str(tmp_path)], ask=never_asked)
    assert rc == EXIT_FAILURE
    assert not (tmp_path / "mouse1_VLS_42_control.nwb").exists()


def test_bad_file_name(tmp_path):
    path = tmp_path / "recording.mat"
    savemat(path, {"a": {"x": np.arange(3.0)}})
    assert main([str(path), "-o", str(tmp_path)], ask=never_asked) == EXIT_USAGE


def test_unreadable_source(tmp_path):
    path = tmp_path / "rat_1_base.mat"
    path.write_bytes(b"x" * 300)
    assert main([str(path), "-o", str(tmp_path)], ask=never_asked) == EXIT_FAILURE


def test_overwrite_declined(source, tmp_path):
    dest = tmp_path / "mouse1_VLS_42_control.nwb"
    dest.write_bytes(b"old")
    rc = main([str(source), "-o", str(tmp_path)], ask=lambda prompt: "n")
    assert rc == EXIT_CANCELLED
    assert dest.read_bytes() == b"old"


def test_overwrite_accepted(source, tmp_path):
    dest = tmp_path / "mouse1_VLS_42_control.nwb"
    dest.write_bytes(b"old")
    rc = main([str(source), "-o", str(tmp_path)], ask=lambda prompt: "y")
    assert rc == EXIT_OK
    assert dest.read_bytes() != b"old"


def test_overwrite_with_yes_flag(source, tmp_path):
    (tmp_path / "mouse1_VLS_42_control.nwb").write_bytes(b"old")
    assert main([str(source), "-o", str(tmp_path), "--yes"], ask=never_asked) == EXIT_OK


def test_export_failure_exit_code(source, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    assert main([str(source), "-o", str(blocker)], ask=never_asked) == EXIT_FAILURE


def test_invalid_compression_level(source, tmp_path):
    rc = main([str(source), "-o", str(tmp_path), "--compression-level", "12"], ask=never_asked)
    assert rc == EXIT_USAGE


def test_confirm_overwrite_on_eof(tmp_path):
    def eof(prompt):
        raise EOFError
    assert confirm_overwrite(tmp_path / "x.nwb", eof) is False
    assert confirm_overwrite(tmp_path / "x.nwb", lambda p: " Yes ") is True


def test_render_skip():
    rec = ChannelRecord("expA_Notes", {"title": "free text", "n": np.array([[2.0]])})
    with pytest.raises(ClassificationSkipped) as info:
        classify_record(rec)
    lines = render_skip(info.value)

    assert lines[0] == "FIELD: expA_Notes"
    assert any('Content: "free text"' in line for line in lines)
    assert any("range [2, 2]" in line for line in lines)
    assert lines[-1].endswith("Could not find suitable numeric data")
