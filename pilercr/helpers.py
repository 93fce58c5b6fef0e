#!/usr/bin/env python3

from io import StringIO

from Bio import SeqIO


def report_to_seqrecords(report, kind="spacer"):
    """Collects repeat or spacer SeqRecords from every array in a Report."""
    return [
        record
        for array in report.arrays
        for record in array.to_seqrecords(kind)
    ]


def report_to_fasta(report, kind="spacer"):
    """Formats the repeats or spacers of a Report as FASTA.

    Parameters:
        report (Report): Parsed PILER-CR report.
        kind (str): 'repeat' or 'spacer'.
    Returns:
        FASTA formatted string.
    """
    handle = StringIO()
    SeqIO.write(report_to_seqrecords(report, kind), handle, "fasta")
    return handle.getvalue()
