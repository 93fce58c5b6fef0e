# !/usr/bin/env python3

"""
Test suite for classes.
"""

import pytest

from tempfile import TemporaryFile

import pilercr

from pilercr import classes


@pytest.fixture
def report(example_text):
    return pilercr.parse(example_text)


@pytest.fixture
def gapped_array(report):
    return report.get("MGYG000232241_150").arrays[0]


def test_report_str(report):
    assert str(report) == "REPORT: 2 arrays on 2 accessions"


def test_report_get_missing(report):
    assert report.get("missing") is None


def test_report_json(report):
    with TemporaryFile(mode="w+") as fp:
        report.to_json(fp)
        fp.seek(0)
        assert classes.Report.from_json(fp) == report


def test_report_to_dict(report):
    d = report.to_dict()
    assert [a["accession"] for a in d["accessions"]] == [
        "MGYG000273829_14",
        "MGYG000232241_150",
    ]
    array = d["accessions"][1]["arrays"][0]
    assert array["index"] == 18
    assert array["repeat_spacers"][2] == {
        "position": 3984,
        "raw_position": 3987,
        "repeat": "GGGTTTCCGTCCCCTTCGGGGAATCATTTAGAAAATA",
        "spacer": "ATCACATTCA",
    }


def test_report_eq_wrong_type(report):
    with pytest.raises(NotImplementedError):
        report == "report"


def test_accession_requires_label():
    with pytest.raises(ValueError):
        classes.Accession("")


def test_repeat_spacer_coordinates(gapped_array):
    expected = [
        # start, end, repeat_start, repeat_end, spacer_start, spacer_end
        (3831, 3905, 3831, 3871, 3871, 3905),
        (3905, 3983, 3905, 3942, 3942, 3983),
        (3983, 4030, 3983, 4020, 4020, 4030),
    ]
    for rs, coordinates in zip(gapped_array, expected):
        assert (
            rs.start,
            rs.end,
            rs.repeat_start,
            rs.repeat_end,
            rs.spacer_start,
            rs.spacer_end,
        ) == coordinates


def test_repeat_spacer_defaults():
    rs = classes.RepeatSpacer("10", "ACGT", "TT")
    assert rs.position == 10
    assert rs.raw_position == 10
    assert rs.length == 6


def test_array_str(gapped_array):
    assert str(gapped_array) == "ARRAY: 18 MGYG000232241_150 [3 repeats, 3831..4030]"


def test_array_is_hashable(report):
    assert len(set(report.arrays)) == 2


def test_array_to_seqrecords(gapped_array):
    records = gapped_array.to_seqrecords("spacer")
    assert [r.id for r in records] == [
        "MGYG000232241_150_18_spacer1",
        "MGYG000232241_150_18_spacer2",
        "MGYG000232241_150_18_spacer3",
    ]
    assert str(records[0].seq) == "GAATTACATCGTATGCCAATACGCAGTTGCTTTT"
    assert records[0].description == "3832-3905"

    repeats = gapped_array.to_seqrecords("repeat")
    assert str(repeats[1].seq) == "AAGTTTCCGTCCCCTTTCGGGGAATCATTTAGAAAAT"


def test_array_to_seqrecords_skips_empty():
    array = classes.Array(
        1,
        "ACGT",
        repeat_spacers=[
            classes.RepeatSpacer(1, "ACGT", "TTT"),
            classes.RepeatSpacer(8, "ACGT", ""),
        ],
        accession="seq1",
    )
    assert len(array.to_seqrecords("spacer")) == 1
    assert len(array.to_seqrecords("repeat")) == 2


def test_array_to_seqrecords_bad_kind(gapped_array):
    with pytest.raises(ValueError):
        gapped_array.to_seqrecords("flank")
