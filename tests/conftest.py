"""Shared fixtures for building synthetic PILER-CR reports."""

from pathlib import Path

import pytest


TEST_DIR = Path(__file__).resolve().parent
DATA_DIR = TEST_DIR / "data"

PREAMBLE = (
    "pilercr v1.06\n"
    "By Robert C. Edgar\n"
    "\n"
    "test.fa: {total} putative CRISPR arrays found.\n"
    "\n\n\n"
    "DETAIL REPORT\n"
    "\n\n\n"
)


def format_block(index, accession, consensus, rows, accession_first=False):
    """Formats one array block the way PILER-CR lays it out.

    Args:
        rows (list): (position, pattern, spacer) tuples.
        accession_first (bool): Put the '>' line before 'Array N'.
    """
    width = max([len(consensus), *(len(pattern) for _, pattern, _ in rows)])
    lines = []
    if accession_first:
        lines.extend([f">{accession}", "", f"Array {index}"])
    else:
        lines.extend([f"Array {index}", f">{accession}"])
    lines.append("")
    lines.append(
        f"{'Pos':>10}  {'Repeat':>6}  {'%id':>6}  {'Spacer':>6}  {'Left flank':>10}"
        f"    {'Repeat':<{width}}    Spacer"
    )
    lines.append(
        f"{'=' * 10}  {'=' * 6}  {'=' * 6}  {'=' * 6}  {'=' * 10}"
        f"    {'=' * width}    {'=' * 6}"
    )
    for number, (position, pattern, spacer) in enumerate(rows, 1):
        spacer_length = "" if number == len(rows) else str(len(spacer))
        lines.append(
            f"{position:>10}  {len(consensus):>6}  {100.0:>6.1f}  {spacer_length:>6}"
            f"  {'ACGTACGTAC':>10}    {pattern:<{width}}    {spacer}"
        )
    lines.append(
        f"{'=' * 10}  {'=' * 6}  {'=' * 6}  {'=' * 6}  {'=' * 10}    {'=' * width}"
    )
    spacers = [len(spacer) for _, _, spacer in rows[:-1]]
    average = str(sum(spacers) // len(spacers)) if spacers else ""
    lines.append(
        f"{len(rows):>10}  {len(consensus):>6}  {'':>6}  {average:>6}  {'':>10}"
        f"    {consensus}"
    )
    lines.extend(["", ""])
    return "\n".join(lines) + "\n"


@pytest.fixture
def make_report():
    """Returns a function building a full report from block arguments."""
    def _make_report(*blocks, **kwargs):
        text = PREAMBLE.format(total=len(blocks))
        for block in blocks:
            text += format_block(*block, **kwargs)
        return text + "SUMMARY BY SIMILARITY\n"
    return _make_report


@pytest.fixture
def example_text():
    return (DATA_DIR / "example.txt").read_text()
