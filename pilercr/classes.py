#!/usr/bin/env python3

"""
This module stores the classes (Report, Accession, Array, RepeatSpacer) used in pilercr.
"""

import json

from abc import ABC, abstractmethod

from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord


class Serializer(ABC):
    """JSON serialisation mixin class.

    Classes that inherit from this class should implement `to_dict` and
    `from_dict` methods.
    """

    @abstractmethod
    def to_dict(self):
        """Serialises class to dict."""
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def from_dict(self, d):
        """Loads class from dict."""
        raise NotImplementedError

    def to_json(self, fp=None, **kwargs):
        """Serialises class to JSON."""
        d = self.to_dict()
        if fp:
            json.dump(d, fp, **kwargs)
        else:
            return json.dumps(d, **kwargs)

    @classmethod
    def from_json(cls, js):
        """Instantiates class from JSON handle."""
        if isinstance(js, str):
            d = json.loads(js)
        else:
            d = json.load(js)
        return cls.from_dict(d)


class Report(Serializer):
    """A parsed PILER-CR report.

    >>> report = pilercr.parse(text)
    >>> for accession in report:
    ...     print(accession.accession, len(accession.arrays))

    Attributes:
        accessions (tuple): Accession objects, in order of first appearance.
    """

    def __init__(self, accessions=None):
        self.accessions = tuple(accessions) if accessions else ()

    def __str__(self):
        return "REPORT: {} arrays on {} accessions".format(
            len(self.arrays), len(self.accessions)
        )

    def __iter__(self):
        return iter(self.accessions)

    def __len__(self):
        return len(self.accessions)

    def __eq__(self, other):
        if not isinstance(other, Report):
            raise NotImplementedError("Expected Report object")
        return self.accessions == other.accessions

    def __hash__(self):
        return hash(self.accessions)

    @property
    def arrays(self):
        return [
            array
            for accession in self.accessions
            for array in accession.arrays
        ]

    def get(self, accession):
        """Finds the Accession with a given label, or None."""
        for record in self.accessions:
            if record.accession == accession:
                return record
        return None

    def to_dict(self):
        return {"accessions": [a.to_dict() for a in self.accessions]}

    @classmethod
    def from_dict(cls, d):
        return cls(accessions=[Accession.from_dict(a) for a in d["accessions"]])


class Accession(Serializer):
    """One input sequence of the PILER-CR run and the arrays found on it.

    Attributes:
        accession (str): Sequence label, verbatim from the '>' header line.
        arrays (tuple): Array objects, in report order.
    """

    def __init__(self, accession, arrays=None):
        if not accession:
            raise ValueError("Accession label must be non-empty")
        self.accession = accession
        self.arrays = tuple(arrays) if arrays else ()

    def __str__(self):
        return "ACCESSION: {} [{} arrays]".format(self.accession, len(self.arrays))

    def __key(self):
        return self.accession, self.arrays

    def __eq__(self, other):
        if not isinstance(other, Accession):
            raise NotImplementedError("Expected Accession object")
        return self.__key() == other.__key()

    def __hash__(self):
        return hash(self.__key())

    def to_dict(self):
        return {
            "accession": self.accession,
            "arrays": [array.to_dict() for array in self.arrays],
        }

    @classmethod
    def from_dict(cls, d):
        return cls(
            d["accession"],
            arrays=[Array.from_dict(a) for a in d["arrays"]],
        )


class Array(Serializer):
    """A single CRISPR array.

    Attributes:
        index (int): 1-based array number, as declared by 'Array N'.
        consensus (str): Consensus repeat sequence. May contain gaps ('-')
            where some repeats carry insertions.
        repeat_spacers (tuple): RepeatSpacer objects, in genomic order.
        accession (str): Label of the sequence this array was found on.
    """

    def __init__(self, index, consensus, repeat_spacers=None, accession=None):
        self.index = int(index)
        self.consensus = consensus
        self.repeat_spacers = tuple(repeat_spacers) if repeat_spacers else ()
        self.accession = accession

    def __str__(self):
        return "ARRAY: {} {} [{} repeats, {}..{}]".format(
            self.index, self.accession, len(self.repeat_spacers), self.start, self.end
        )

    def __iter__(self):
        return iter(self.repeat_spacers)

    def __len__(self):
        return len(self.repeat_spacers)

    def __key(self):
        return self.index, self.consensus, self.repeat_spacers, self.accession

    def __eq__(self, other):
        if not isinstance(other, Array):
            raise NotImplementedError("Expected Array object")
        return self.__key() == other.__key()

    def __hash__(self):
        return hash(self.__key())

    @property
    def order(self):
        """Zero-based position of this array in the report."""
        return self.index - 1

    @property
    def start(self):
        """Zero-based, inclusive start of the first repeat."""
        if not self.repeat_spacers:
            return None
        return self.repeat_spacers[0].start

    @property
    def end(self):
        """Zero-based, exclusive end of the last spacer."""
        if not self.repeat_spacers:
            return None
        return self.repeat_spacers[-1].end

    @property
    def repeats(self):
        return [rs.repeat for rs in self.repeat_spacers]

    @property
    def spacers(self):
        return [rs.spacer for rs in self.repeat_spacers]

    def to_seqrecords(self, kind="spacer"):
        """Builds SeqRecord objects for the repeats or spacers of this array.

        Record IDs take the form <accession>_<index>_<kind><number>, numbered
        from 1. Empty sequences (e.g. a missing trailing spacer) are skipped.

        Args:
            kind (str): 'repeat' or 'spacer'.
        Raises:
            ValueError: `kind` not 'repeat' or 'spacer'
        Returns:
            list: SeqRecord objects
        """
        if kind not in ("repeat", "spacer"):
            raise ValueError("Expected 'repeat' or 'spacer'")
        records = []
        for number, rs in enumerate(self.repeat_spacers, 1):
            sequence = getattr(rs, kind)
            if not sequence:
                continue
            record = SeqRecord(
                Seq(sequence),
                id=f"{self.accession}_{self.index}_{kind}{number}",
                description=f"{rs.start + 1}-{rs.end}",
            )
            records.append(record)
        return records

    def to_dict(self):
        return {
            "index": self.index,
            "accession": self.accession,
            "consensus": self.consensus,
            "repeat_spacers": [rs.to_dict() for rs in self.repeat_spacers],
        }

    @classmethod
    def from_dict(cls, d):
        return cls(
            d["index"],
            d["consensus"],
            repeat_spacers=[RepeatSpacer.from_dict(rs) for rs in d["repeat_spacers"]],
            accession=d.get("accession"),
        )


class RepeatSpacer(Serializer):
    """A repeat and the spacer following it.

    Attributes:
        position (int): Corrected 1-based position of the repeat.
        repeat (str): Reconstructed repeat sequence, gaps removed.
        spacer (str): Spacer sequence, as reported.
        raw_position (int): Position as printed by PILER-CR, before correction.
    """

    def __init__(self, position, repeat, spacer, raw_position=None):
        self.position = int(position)
        self.repeat = repeat
        self.spacer = spacer
        self.raw_position = int(raw_position) if raw_position is not None else self.position

    def __str__(self):
        return f"RepeatSpacer: {self.position} {self.repeat} {self.spacer}"

    def __key(self):
        return self.position, self.repeat, self.spacer, self.raw_position

    def __eq__(self, other):
        if not isinstance(other, RepeatSpacer):
            raise NotImplementedError("Expected RepeatSpacer object")
        return self.__key() == other.__key()

    def __hash__(self):
        return hash(self.__key())

    @property
    def length(self):
        return len(self.repeat) + len(self.spacer)

    @property
    def start(self):
        return self.position - 1

    @property
    def end(self):
        return self.start + self.length

    @property
    def repeat_start(self):
        return self.start

    @property
    def repeat_end(self):
        return self.start + len(self.repeat)

    @property
    def spacer_start(self):
        return self.repeat_end

    @property
    def spacer_end(self):
        return self.end

    def to_dict(self):
        return {
            "position": self.position,
            "raw_position": self.raw_position,
            "repeat": self.repeat,
            "spacer": self.spacer,
        }

    @classmethod
    def from_dict(cls, d):
        return cls(**d)
