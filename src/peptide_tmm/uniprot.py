"""
Scan UniProt knowledgebase flat files (``uniprot_sprot.dat``, ``uniprot_trembl.dat``).

Only entries whose ``AC`` lines list an accession observed in the report are
assembled; all other entries are skipped line by line. For every assembled
entry the sequence and ``FT   TRANSMEM`` positions are collected and the
observed peptides are matched right away, so no entry is kept in memory after
its ``//`` terminator.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Container, Iterable, Iterator

from loguru import logger

from peptide_tmm.errors import DuplicateAccessionError
from peptide_tmm.io import LineReader, open_text
from peptide_tmm.matcher import ProteinFeatures, ProteinResult, match_protein
from peptide_tmm.normalize import normalize_sequence
from peptide_tmm.observations import ObservationIndex
from peptide_tmm.results import MatchResults

ACCESSION_PREFIX = "AC   "
TRANSMEM_PREFIX = "FT   TRANSMEM "
SEQUENCE_PREFIX = "     "
TERMINATOR = "//"


class DuplicatePolicy(str, Enum):
    """What to do when an accession is found in more than one entry."""

    LAST = "last"
    FIRST = "first"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class UniprotEntry:
    """A relevant entry: the requested accessions it lists and its features."""

    accessions: tuple[str, ...]
    sequence: str
    tm_positions: frozenset[int]
    tm_region_count: int

    def features(self, accession: str) -> ProteinFeatures:
        return ProteinFeatures(
            accession=accession,
            sequence=self.sequence,
            tm_positions=self.tm_positions,
            tm_region_count=self.tm_region_count,
        )


@dataclass
class ScanStats:
    """Counts reported after the UniProt scan."""

    entries_matched: int = 0
    proteins_matched: int = 0
    proteins_with_tm: int = 0
    peptides_matched: int = 0
    peptides_with_tm: int = 0
    peptides_unmatched: int = 0


def _position(token: str, reader: LineReader) -> int | None:
    token = token.lstrip("<>").rstrip("<>")
    if token == "?" or not token:
        return None
    try:
        return int(token)
    except ValueError:
        raise reader.error(f"invalid TRANSMEM position {token!r}") from None


def parse_transmem_range(line: str, reader: LineReader) -> range | None:
    """Residues (1-based, inclusive) of a TRANSMEM feature line.

    Accepts both the legacy column layout (``FT   TRANSMEM   10   30``) and the
    current range layout (``FT   TRANSMEM   10..30``). Returns None when an
    endpoint is unknown (``?``).
    """
    tokens = line.split()
    if len(tokens) < 3:
        raise reader.error("TRANSMEM feature without positions")
    if ".." in tokens[2]:
        first, last = tokens[2].split("..", 1)
    elif len(tokens) >= 4:
        first, last = tokens[2], tokens[3]
    else:
        first = last = tokens[2]
    start, end = _position(first, reader), _position(last, reader)
    if start is None or end is None:
        return None
    return range(start, end + 1)


def read_entries(reader: LineReader, wanted: Container[str]) -> Iterator[UniprotEntry]:
    """
    Yield the entries of a flat file that list at least one wanted accession.

    Args:
        reader: Line stream over one UniProt flat file
        wanted: Accessions of interest

    Raises:
        MalformedRecordError: If the stream ends inside an entry or a
            TRANSMEM line cannot be parsed
    """
    accessions: list[str] = []
    sequence: list[str] = []
    tm_positions: set[int] = set()
    tm_regions = 0
    in_entry = False

    for line in reader:
        if line.rstrip() == TERMINATOR:
            if accessions:
                yield UniprotEntry(
                    accessions=tuple(accessions),
                    sequence=normalize_sequence("".join(sequence)),
                    tm_positions=frozenset(tm_positions),
                    tm_region_count=tm_regions,
                )
            accessions, sequence, tm_positions, tm_regions = [], [], set(), 0
            in_entry = False
            continue
        if line.strip():
            in_entry = True

        if line.startswith(ACCESSION_PREFIX):
            for accession in line[len(ACCESSION_PREFIX):].split(";"):
                accession = accession.strip()
                if accession and accession in wanted and accession not in accessions:
                    accessions.append(accession)
        elif not accessions:
            continue
        elif line.startswith(SEQUENCE_PREFIX):
            sequence.append("".join(line.split()))
        elif line.startswith(TRANSMEM_PREFIX):
            tm_regions += 1
            residues = parse_transmem_range(line, reader)
            if residues is None:
                logger.warning(
                    f"{reader.source}:{reader.line_number}: TRANSMEM region with unknown "
                    f"boundaries in entry {accessions[0]}, positions ignored"
                )
            else:
                tm_positions.update(residues)

    if in_entry:
        raise reader.error("unexpected end of stream inside UniProt entry (missing '//')")


class UniprotScanner:
    """Match the observed peptides against one or more UniProt files.

    The scanner owns the results while scanning; ``results()`` hands out a
    read-only view once all files are done.
    """

    def __init__(
        self,
        index: ObservationIndex,
        duplicates: DuplicatePolicy = DuplicatePolicy.LAST,
        backend: str = "auto",
    ):
        self.index = index
        self.duplicates = DuplicatePolicy(duplicates)
        self.backend = backend
        self.stats = ScanStats()
        self._proteins: dict[str, ProteinResult] = {}

    def scan_file(self, path: str | Path) -> None:
        path = Path(path)
        logger.info(f"looking for protein sequence and transmembrane regions in {path.name}")
        with open_text(path) as f:
            self.scan_lines(f, source=path.name)

    def scan_lines(self, lines: Iterable[str], source: str = "<uniprot>") -> None:
        reader = LineReader(lines, source=source)
        for entry in read_entries(reader, self.index):
            self.stats.entries_matched += 1
            for accession in entry.accessions:
                self._store(accession, entry, source)

    def _store(self, accession: str, entry: UniprotEntry, source: str) -> None:
        if accession in self._proteins:
            if self.duplicates is DuplicatePolicy.ERROR:
                logger.error(f"accession {accession} found in more than one UniProt entry ({source})")
                raise DuplicateAccessionError(f"accession {accession} found in more than one UniProt entry")
            if self.duplicates is DuplicatePolicy.FIRST:
                logger.debug(f"keeping first entry for {accession}, ignoring later one in {source}")
                return
            logger.debug(f"replacing earlier entry for {accession} with one from {source}")
        self._proteins[accession] = match_protein(
            entry.features(accession), self.index.peptides(accession), backend=self.backend
        )

    def results(self) -> MatchResults:
        proteins = self._proteins.values()
        self.stats.proteins_matched = len(self._proteins)
        self.stats.proteins_with_tm = sum(1 for r in proteins if r.features.has_tm_regions)
        self.stats.peptides_matched = sum(len(r.matches) for r in proteins)
        self.stats.peptides_with_tm = sum(r.n_matches_tm for r in proteins)
        self.stats.peptides_unmatched = sum(len(r.unmatched) for r in proteins)
        return MatchResults(proteins=MappingProxyType(dict(self._proteins)))


def scan_uniprot(
    paths: Iterable[str | Path],
    index: ObservationIndex,
    duplicates: DuplicatePolicy = DuplicatePolicy.LAST,
    backend: str = "auto",
) -> tuple[MatchResults, ScanStats]:
    """
    Scan UniProt files in order and match every observed protein found.

    Args:
        paths: UniProt flat files, optionally gzipped
        index: Peptides observed per accession (pass 1 of the report)
        duplicates: Policy for accessions found in more than one entry
        backend: Automaton backend used for peptide localization

    Returns:
        Tuple of (read-only MatchResults, ScanStats)
    """
    scanner = UniprotScanner(index, duplicates=duplicates, backend=backend)
    for path in paths:
        scanner.scan_file(path)
    results = scanner.results()
    stats = scanner.stats
    logger.info(
        f"could match {stats.entries_matched} proteins ({stats.proteins_with_tm} of them having TM regions) "
        f"with {stats.peptides_matched} peptides ({stats.peptides_with_tm} of them intersecting with a TM region)"
    )
    return results, stats
