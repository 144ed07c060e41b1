"""Exception types raised by peptide-tmm."""


class PeptideTmmError(Exception):
    """Base class for all peptide-tmm errors."""


class ConfigurationError(PeptideTmmError):
    """Invalid or missing run configuration (inputs, options, config file)."""


class MalformedRecordError(PeptideTmmError, ValueError):
    """Input stream does not have the structure the parser expects.

    Attributes:
        source: Name of the stream (usually a file name), if known
        line_number: 1-based line number at which the problem was detected
    """

    def __init__(self, message: str, source: str | None = None, line_number: int | None = None):
        self.source = source
        self.line_number = line_number
        location = ""
        if source is not None:
            location = f"{source}:{line_number}: " if line_number is not None else f"{source}: "
        super().__init__(f"{location}{message}")


class DuplicateAccessionError(PeptideTmmError, ValueError):
    """Accession found in more than one UniProt entry with duplicates='error'."""
