"""
Line scanner for PILER-CR text reports.

A PILER-CR report has a short preamble, a DETAIL REPORT made of one block per
array, and two trailing summary tables. Each array block looks like:

    Array 18
    >MGYG000232241_150

           Pos  Repeat     %id  Spacer  Left flank    Repeat       Spacer
    ==========  ======  ======  ======  ==========    ==========   ======
          3832      40    92.5      34  CATATAGCAA    ..A.....C.   GAATTACATC
          ...
    ==========  ======  ======  ======  ==========    ==========
             3      40              37                AAGTTTCC-A

scan() turns the text into a stream of line events for the array builder.
Only the detail report is scanned; the summary tables repeat '>' labels and
rows which are not array content.
"""

import re
import logging

from collections import namedtuple
from itertools import pairwise

from Bio.Data import IUPACData

from pilercr.errors import MalformedLine


LOG = logging.getLogger(__name__)

MATCH = "."
GAP = "-"
NUCLEOTIDES = frozenset(
    IUPACData.ambiguous_dna_letters + IUPACData.ambiguous_dna_letters.lower()
)

ARRAY_RE = re.compile(r"^Array\s+(?P<index>[0-9]+)\s*$")
ACCESSION_RE = re.compile(r"^>(?P<label>\S.*?)\s*$")
SEPARATOR_RE = re.compile(r"^\s*=+(?:\s+=+)*\s*$")
COLUMN_RE = re.compile(r"=+")
TITLES_RE = re.compile(r"^\s*Pos\s+Repeat\s+%id\s+Spacer\s+Left flank\s+Repeat\s+Spacer\s*$")
SUMMARY_RE = re.compile(r"^SUMMARY BY (?:SIMILARITY|POSITION)")
CONSENSUS_RE = re.compile(
    r"^\s*(?P<copies>[0-9]+)\s+(?P<repeat_length>[0-9]+)\s+"
    r"(?:(?P<spacer_length>[0-9]+)\s+)?(?P<sequence>\S+)\s*$"
)
SEQUENCE_RE = re.compile(r"^[A-Za-z]*$")
NUMBER_RE = re.compile(r"^[0-9]+$")
IDENTITY_RE = re.compile(r"^[0-9]+(?:\.[0-9]+)?$")

# Number of '=' columns before the difference pattern:
# Pos, Repeat, %id, Spacer, Left flank
FIXED_COLUMNS = 5

AccessionHeader = namedtuple("AccessionHeader", "line_no label")
ArrayHeader = namedtuple("ArrayHeader", "line_no index")
TableSeparator = namedtuple("TableSeparator", "line_no columns text")
DataRow = namedtuple(
    "DataRow",
    [
        "line_no",
        "raw_position",
        "repeat_length",
        "identity",
        "spacer_length",
        "left_flank",
        "raw_repeat_pattern",
        "raw_spacer",
    ],
)
ConsensusRow = namedtuple("ConsensusRow", "line_no sequence")
BlankOrOther = namedtuple("BlankOrOther", "line_no text")

# Scanner contexts
OUTSIDE = "outside"
ARRAY_HEAD = "array_head"
ROWS = "rows"
CONSENSUS = "consensus"


def get_columns(line):
    """Finds the (start, end) spans of each '=' run in a separator line."""
    return [match.span() for match in COLUMN_RE.finditer(line)]


def is_sequence(text):
    return bool(SEQUENCE_RE.match(text)) and all(c in NUCLEOTIDES for c in text)


def is_consensus(text):
    return bool(text) and all(c in NUCLEOTIDES or c == GAP for c in text)


def parse_data_row(line, line_no, columns):
    """Parses a repeat-spacer row of an array table.

    The numeric columns and the left flank are sliced out using the spans of
    the opening separator, since the spacer length is blank on the last row
    of every array. The rest of the line is split on whitespace into the
    difference pattern and the (possibly missing) spacer.

    Args:
        line (str): The raw row.
        line_no (int): 1-based line number, used in errors.
        columns (list): (start, end) spans from the opening separator.
    Raises:
        MalformedLine: The row does not fit the table layout.
    Returns:
        DataRow
    """
    starts = [start for start, _ in columns[: FIXED_COLUMNS + 1]]
    fields = [line[s:e].strip() for s, e in pairwise(starts)]
    rest = line[starts[-1]:].split()

    position, repeat_length, identity, spacer_length, left_flank = fields
    if (
        not NUMBER_RE.match(position)
        or not NUMBER_RE.match(repeat_length)
        or not IDENTITY_RE.match(identity)
        or not (spacer_length == "" or NUMBER_RE.match(spacer_length))
        or not is_sequence(left_flank)
        or len(rest) not in (1, 2)
    ):
        raise MalformedLine(line_no, line)

    pattern, *spacer = rest
    spacer = spacer[0] if spacer else ""
    if not is_sequence(spacer):
        raise MalformedLine(line_no, line)

    return DataRow(
        line_no=line_no,
        raw_position=int(position),
        repeat_length=int(repeat_length),
        identity=float(identity),
        spacer_length=int(spacer_length) if spacer_length else None,
        left_flank=left_flank,
        raw_repeat_pattern=pattern,
        raw_spacer=spacer,
    )


def parse_consensus_row(line, line_no):
    """Gets the consensus sequence from the last line of an array block."""
    match = CONSENSUS_RE.match(line)
    if not match or not is_consensus(match.group("sequence")):
        raise MalformedLine(line_no, line)
    return ConsensusRow(line_no=line_no, sequence=match.group("sequence"))


def scan(text):
    """Classifies each line of a PILER-CR report.

    Args:
        text (str): The full report.
    Raises:
        MalformedLine: A line inside an array block fits no known shape.
    Yields:
        Line event namedtuples, each with a 1-based `line_no`.
    """
    context = OUTSIDE
    columns = None

    for line_no, line in enumerate(text.splitlines(), 1):
        stripped = line.strip()

        if SUMMARY_RE.match(line):
            LOG.debug("End of detail report at line %d", line_no)
            return

        match = ARRAY_RE.match(line)
        if match:
            index = int(match.group("index"))
            if index < 1:
                raise MalformedLine(line_no, line)
            context = ARRAY_HEAD
            yield ArrayHeader(line_no=line_no, index=index)
            continue

        match = ACCESSION_RE.match(line)
        if match:
            yield AccessionHeader(line_no=line_no, label=match.group("label"))
            continue

        if not stripped or context == OUTSIDE:
            yield BlankOrOther(line_no=line_no, text=line)
            continue

        if context == ARRAY_HEAD:
            if TITLES_RE.match(line):
                yield BlankOrOther(line_no=line_no, text=line)
            elif SEPARATOR_RE.match(line):
                columns = get_columns(line)
                if len(columns) <= FIXED_COLUMNS:
                    raise MalformedLine(line_no, line)
                context = ROWS
                yield TableSeparator(line_no=line_no, columns=columns, text=line)
            else:
                raise MalformedLine(line_no, line)

        elif context == ROWS:
            if SEPARATOR_RE.match(line):
                context = CONSENSUS
                yield TableSeparator(line_no=line_no, columns=get_columns(line), text=line)
            else:
                yield parse_data_row(line, line_no, columns)

        elif context == CONSENSUS:
            context = OUTSIDE
            yield parse_consensus_row(line, line_no)
