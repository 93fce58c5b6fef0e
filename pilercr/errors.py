"""Exceptions raised while parsing PILER-CR reports."""


class ParseError(ValueError):
    """Base class for all PILER-CR parsing errors."""


class MalformedLine(ParseError):
    """A line in a structurally required position could not be classified.

    Attributes:
        line_no (int): 1-based line number in the report.
        text (str): Raw text of the offending line.
    """

    def __init__(self, line_no, text):
        self.line_no = line_no
        self.text = text
        super().__init__(f"Malformed line {line_no}: {text!r}")


class UnterminatedArray(ParseError):
    """An array block ended before its consensus line was seen.

    Attributes:
        accession (str): Accession of the open array, if known.
        array_index (int): 1-based index of the open array.
    """

    def __init__(self, accession, array_index):
        self.accession = accession
        self.array_index = array_index
        super().__init__(
            f"Array {array_index} ({accession or 'no accession'})"
            " ended without a consensus line"
        )


class InvalidSequenceSymbol(ParseError):
    """A difference pattern contained a symbol outside the recognised alphabet.

    `reconstruct_repeat` raises this without array context; the array builder
    re-raises it with `array_index` and `row_index` filled in.

    Attributes:
        array_index (int): 1-based index of the array, if known.
        row_index (int): 0-based index of the row within the array, if known.
        symbol (str): The offending character.
    """

    def __init__(self, symbol, array_index=None, row_index=None):
        self.symbol = symbol
        self.array_index = array_index
        self.row_index = row_index
        where = ""
        if array_index is not None:
            where = f" in array {array_index}, row {row_index}"
        super().__init__(f"Invalid sequence symbol {symbol!r}{where}")


class EmptyArray(ParseError):
    """An array block closed without any repeat-spacer rows.

    Attributes:
        accession (str): Accession of the array.
        array_index (int): 1-based index of the array.
    """

    def __init__(self, accession, array_index):
        self.accession = accession
        self.array_index = array_index
        super().__init__(f"Array {array_index} ({accession}) has no repeats")
