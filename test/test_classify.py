# test/test_classify.py
import numpy as np
import pytest

from mat2nwb.core import ChannelRecord, ClassificationSkipped
from mat2nwb.core.classify import (
    ClassifiedChannel,
    classify_record,
    earliest_timestamp,
    find_canonical_fields,
)
from mat2nwb.core.orientation import COLUMN_LAYOUT, ROW_LAYOUT


def row(values):
    return np.asarray(values, dtype=float).reshape(1, -1)


def col(values):
    return np.asarray(values, dtype=float).reshape(-1, 1)


class TestCanonicalPath:
    def test_times_values_regular(self):
        rec = ChannelRecord("expA_ChR2", {"times": row(np.arange(5) * 0.1), "values": row(range(5))})
        ch = classify_record(rec)

        assert ch.time_field == "times"
        assert ch.value_field == "values"
        assert not ch.fallback
        assert ch.time_axis == ROW_LAYOUT
        assert ch.sampling.is_regular
        assert ch.sampling.rate == pytest.approx(10.0)
        assert ch.source_name == "expA_ChR2"
        assert ch.output_name == "expA_ChR2"

    def test_column_vectors_become_rows(self):
        rec = ChannelRecord("x", {"t": col([0.0, 0.1, 0.2, 0.7]), "data": col([1, 2, 3, 4])})
        ch = classify_record(rec)

        assert ch.data.shape == (1, 4)
        assert ch.time_first().shape == (4,)
        assert not ch.sampling.is_regular
        assert np.allclose(ch.sampling.timestamps, [0.0, 0.1, 0.2, 0.7])
        assert any("transposed" in n for n in ch.notes)

    def test_first_candidate_wins(self):
        rec = ChannelRecord(
            "x",
            {"t": row([9, 10]), "time": row([0, 1]), "Y": row([5, 6]), "signal": row([1, 2])},
        )
        assert find_canonical_fields(rec) == ("time", "signal")
        ch = classify_record(rec)
        assert ch.time_field == "time"
        assert ch.value_field == "signal"
        assert ch.sampling.start_time == 0.0

    def test_single_sample(self):
        rec = ChannelRecord("x", {"times": np.array([[4.5]]), "values": np.array([[1.0]])})
        ch = classify_record(rec)
        assert ch.sampling.is_regular
        assert ch.sampling.rate == 1.0
        assert ch.sampling.start_time == 4.5

    def test_length_mismatch_is_noted(self):
        rec = ChannelRecord("x", {"times": row([0, 1, 2]), "values": row([1, 2])})
        ch = classify_record(rec)
        assert any("2 samples" in n for n in ch.notes)


class TestFallbackPath:
    def test_first_multirow_numeric_field(self):
        rec = ChannelRecord(
            "expA_Pos",
            {"title": "position", "interval": np.array([[0.01]]), "trace": row(range(6))},
        )
        ch = classify_record(rec)

        assert ch.fallback
        assert ch.value_field == "trace"
        assert ch.time_field is None
        assert ch.source_name == "expA_Pos_trace"
        assert ch.time_axis == COLUMN_LAYOUT
        assert ch.data.shape == (6, 1)
        assert ch.sampling.is_regular
        assert ch.sampling.start_time == 0.0
        assert ch.sampling.rate == 1.0
        assert ch.n == 6

    def test_wide_matrix_is_time_first(self):
        rec = ChannelRecord("x", {"codes": np.zeros((3, 40))})
        ch = classify_record(rec)
        assert ch.data.shape == (40, 3)
        assert ch.time_first().shape == (40, 3)

    def test_non_numeric_pair_falls_back(self):
        rec = ChannelRecord(
            "x",
            {"times": np.array(["a", "b"]), "values": row([1, 2, 3]), "extra": col([1, 2])},
        )
        ch = classify_record(rec)
        assert ch.fallback
        assert ch.value_field == "values"
        assert any("not usable" in n for n in ch.notes)

    def test_missing_value_field_falls_back(self):
        rec = ChannelRecord("x", {"times": row([0.0, 1.0, 2.0])})
        ch = classify_record(rec)
        assert ch.fallback
        assert ch.value_field == "times"


class TestSkipped:
    def test_nothing_numeric(self):
        rec = ChannelRecord(
            "expA_Notes",
            {"title": "notes", "comment": "", "flag": np.array([[True, False]]), "n": np.array([[3.0]])},
        )
        with pytest.raises(ClassificationSkipped) as info:
            classify_record(rec)

        skip = info.value
        assert skip.channel == "expA_Notes"
        assert [d.name for d in skip.diagnostics] == ["title", "comment", "flag", "n"]
        assert skip.diagnostics[3].note is not None

    def test_top_level_non_struct(self):
        rec = ChannelRecord("scalar", {}, attrs={"matlab_class": "double"})
        with pytest.raises(ClassificationSkipped) as info:
            classify_record(rec)
        assert "not a struct" in info.value.reason


def test_rename_keeps_everything_else():
    rec = ChannelRecord("expA_ChR2", {"times": row([0, 1]), "values": row([1, 2])})
    ch = classify_record(rec)
    renamed = ch.rename("ChR2")

    assert isinstance(renamed, ClassifiedChannel)
    assert renamed.output_name == "ChR2"
    assert renamed.source_name == "expA_ChR2"
    assert renamed.description == "expA_ChR2"
    assert ch.output_name == "expA_ChR2"


def test_earliest_timestamp():
    records = [
        ChannelRecord("a", {"times": row([5.0, 6.0]), "values": row([1, 2])}),
        ChannelRecord("b", {"t": col([2.5, 3.0])}),
        ChannelRecord("c", {"trace": row([0.0, -100.0])}),
        ChannelRecord("d", {"time": np.array(["x"])}),
    ]
    assert earliest_timestamp(records) == 2.5
    assert earliest_timestamp([records[2]]) is None
