"""
Builds corrected CRISPR arrays from scanned PILER-CR report lines.

PILER-CR (v1.06 at least) computes repeat positions as though every repeat had
the length of the aligned consensus. Repeats containing gaps are shorter than
that, so every position after a gapped repeat drifts. Repeats are also only
given as difference patterns against the consensus. Once an array's consensus
is known, each repeat is rebuilt from its pattern and positions are recomputed
from the true repeat and spacer lengths.
"""

import logging

from pilercr.classes import Accession, Array, Report, RepeatSpacer
from pilercr.errors import (
    EmptyArray,
    InvalidSequenceSymbol,
    MalformedLine,
    UnterminatedArray,
)
from pilercr.scanner import (
    GAP,
    MATCH,
    NUCLEOTIDES,
    AccessionHeader,
    ArrayHeader,
    ConsensusRow,
    DataRow,
    TableSeparator,
    scan,
)


LOG = logging.getLogger(__name__)

# Builder states
AWAITING_ACCESSION = "awaiting_accession"
IN_ACCESSION = "in_accession"
IN_ARRAY = "in_array"


def reconstruct_repeat(consensus, pattern):
    """Builds the literal repeat sequence from its difference pattern.

    Each pattern symbol is read against the consensus base at the same index:

        '.'     copies the consensus base (nothing, if the consensus has a gap)
        '-'     the repeat has no base here
        letter  substitution, or an insertion where the consensus has a gap
                or the pattern runs past the end of the consensus

    >>> reconstruct_repeat("ACGTACGT", "..--ACGT")
    'ACACGT'

    Args:
        consensus (str): Consensus repeat of the array.
        pattern (str): Difference pattern of one repeat.
    Raises:
        InvalidSequenceSymbol: Symbol is not '.', '-' or an IUPAC nucleotide,
            or '.' falls past the end of the consensus.
    Returns:
        str: The repeat sequence, without gaps.
    """
    bases = []
    for index, symbol in enumerate(pattern):
        if symbol == GAP:
            continue
        if symbol == MATCH:
            if index >= len(consensus):
                raise InvalidSequenceSymbol(symbol)
            if consensus[index] != GAP:
                bases.append(consensus[index])
        elif symbol in NUCLEOTIDES:
            bases.append(symbol)
        else:
            raise InvalidSequenceSymbol(symbol)
    return "".join(bases)


def correct_positions(first_position, repeats, spacers):
    """Recomputes repeat positions from true sequence lengths.

    The first position is trusted as reported; every later repeat starts where
    the previous repeat and its spacer end.

    Args:
        first_position (int): Reported position of the first repeat.
        repeats (list): Reconstructed repeat sequences.
        spacers (list): Spacer sequences.
    Returns:
        list: Corrected positions, one per repeat.
    """
    positions = []
    position = first_position
    for repeat, spacer in zip(repeats, spacers):
        positions.append(position)
        position += len(repeat) + len(spacer)
    return positions


def build_array(index, accession, consensus, rows):
    """Creates an Array from raw DataRow events and the array consensus.

    Raises:
        InvalidSequenceSymbol: A row's pattern has an unrecognised symbol.
    """
    repeats = []
    for row_index, row in enumerate(rows):
        try:
            repeats.append(reconstruct_repeat(consensus, row.raw_repeat_pattern))
        except InvalidSequenceSymbol as e:
            raise InvalidSequenceSymbol(
                e.symbol, array_index=index, row_index=row_index
            ) from e

    spacers = [row.raw_spacer for row in rows]
    positions = (
        correct_positions(rows[0].raw_position, repeats, spacers) if rows else []
    )

    repeat_spacers = []
    for row, position, repeat, spacer in zip(rows, positions, repeats, spacers):
        if position != row.raw_position:
            LOG.debug(
                "Array %d (%s): corrected repeat position %d -> %d",
                index,
                accession,
                row.raw_position,
                position,
            )
        repeat_spacers.append(
            RepeatSpacer(position, repeat, spacer, raw_position=row.raw_position)
        )
    return Array(index, consensus, repeat_spacers=repeat_spacers, accession=accession)


class PendingArray:
    """Accumulates the lines of an array block until its consensus is seen."""

    def __init__(self, index, accession=None):
        self.index = index
        self.accession = accession
        self.labelled = False
        self.table_started = False
        self.rows = []

    def can_take_accession(self):
        return not self.labelled and not self.table_started


class ArrayBuilder:
    """Assembles a Report from scanner events.

    The builder is a small state machine:

        AWAITING_ACCESSION --'>label'--> IN_ACCESSION
        IN_ACCESSION --'Array N'--> IN_ARRAY
        IN_ARRAY --data row--> IN_ARRAY
        IN_ARRAY --consensus--> IN_ACCESSION

    PILER-CR itself writes 'Array N' before the '>label' of each array, so an
    'Array N' line may also open an array with its accession still unknown;
    the '>label' line that follows (before the table) names it.

    Attributes:
        allow_empty (bool): Emit arrays without rows instead of raising EmptyArray.
    """

    def __init__(self, allow_empty=False):
        self.allow_empty = allow_empty
        self.state = AWAITING_ACCESSION
        self.records = {}
        self.current = None
        self.pending = None

    def select_accession(self, label):
        """Makes `label` the current accession, creating its record if new."""
        if label not in self.records:
            LOG.debug("New accession: %s", label)
            self.records[label] = []
        self.current = label

    def open_array(self, event):
        if self.pending is not None:
            raise UnterminatedArray(self.pending.accession, self.pending.index)
        accession = self.current if self.state == IN_ACCESSION else None
        self.pending = PendingArray(event.index, accession=accession)
        self.state = IN_ARRAY

    def take_accession(self, event):
        if self.pending is None:
            self.select_accession(event.label)
            self.state = IN_ACCESSION
        elif self.pending.can_take_accession():
            self.select_accession(event.label)
            self.pending.accession = event.label
            self.pending.labelled = True
        else:
            raise UnterminatedArray(self.pending.accession, self.pending.index)

    def start_table(self, event):
        if self.pending.accession is None:
            raise MalformedLine(event.line_no, event.text)
        self.pending.table_started = True

    def close_array(self, event):
        pending = self.pending
        if not pending.rows:
            if not self.allow_empty:
                raise EmptyArray(pending.accession, pending.index)
            LOG.warning(
                "Array %d (%s) has no repeats", pending.index, pending.accession
            )
        array = build_array(pending.index, pending.accession, event.sequence, pending.rows)
        LOG.debug(
            "Built array %d (%s) with %d repeats",
            array.index,
            array.accession,
            len(array),
        )
        self.records[pending.accession].append(array)
        self.current = pending.accession
        self.pending = None
        self.state = IN_ACCESSION

    def feed(self, event):
        """Advances the state machine by one scanner event."""
        if isinstance(event, ArrayHeader):
            self.open_array(event)
        elif isinstance(event, AccessionHeader):
            self.take_accession(event)
        elif isinstance(event, TableSeparator):
            if self.pending is not None and not self.pending.table_started:
                self.start_table(event)
        elif isinstance(event, DataRow):
            self.pending.rows.append(event)
        elif isinstance(event, ConsensusRow):
            self.close_array(event)

    def finish(self):
        """Ends the input and returns the finished Report.

        Raises:
            UnterminatedArray: An array is still open.
        """
        if self.state == IN_ARRAY:
            raise UnterminatedArray(self.pending.accession, self.pending.index)
        return Report([
            Accession(label, arrays=arrays)
            for label, arrays in self.records.items()
        ])


def parse(report_text, allow_empty=False):
    """Parses a PILER-CR report.

    Parsing is all-or-nothing: any error aborts the whole report.

    Args:
        report_text (str): Full text of the PILER-CR output.
        allow_empty (bool): Keep arrays without repeats rather than raising
            EmptyArray. PILER-CR never reports such arrays itself.
    Raises:
        ParseError: One of MalformedLine, UnterminatedArray,
            InvalidSequenceSymbol or EmptyArray.
    Returns:
        Report
    """
    builder = ArrayBuilder(allow_empty=allow_empty)
    for event in scan(report_text):
        builder.feed(event)
    report = builder.finish()
    LOG.debug("Parsed %s", report)
    return report
