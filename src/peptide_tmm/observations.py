"""
Pass 1 over the identification report: which peptides belong to which protein.

The report is either a ProteinProphet protXML file or its tab-separated
export. The shape is sniffed from the first non-empty line and the chosen
ReportShape is reused for the annotation pass.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from loguru import logger

from peptide_tmm.io import LineReader
from peptide_tmm.normalize import normalize_accession, normalize_peptide
from peptide_tmm.xml_lines import get_attribute, is_closing, is_element

PROTEIN_COLUMN = "protein"
PEPTIDE_COLUMN = "peptide sequence"


class ReportShape(Enum):
    """Layout of the identification report."""

    PROTXML = "protxml"
    TABULAR = "tabular"


def detect_report_shape(first_line: str) -> ReportShape:
    """Choose the report shape from its first non-empty line."""
    if first_line.lstrip().startswith("<?xml"):
        return ReportShape.PROTXML
    return ReportShape.TABULAR


def locate_columns(header: list[str], reader: LineReader) -> tuple[int, int]:
    """Return the indices of the protein and peptide columns of a tabular header."""
    missing = [name for name in (PROTEIN_COLUMN, PEPTIDE_COLUMN) if name not in header]
    if missing:
        raise reader.error(f"report header lacks required column(s): {', '.join(missing)}")
    return header.index(PROTEIN_COLUMN), header.index(PEPTIDE_COLUMN)


@dataclass(frozen=True)
class ObservationIndex:
    """Distinct normalized peptides observed per normalized accession.

    Attributes:
        shape: Report shape detected while building the index
        peptides_by_protein: Read-only accession -> peptide set mapping
        n_entries: Number of (protein, peptide) entries read, duplicates included
    """

    shape: ReportShape
    peptides_by_protein: Mapping[str, frozenset[str]]
    n_entries: int

    def __contains__(self, accession: str) -> bool:
        return accession in self.peptides_by_protein

    def peptides(self, accession: str) -> frozenset[str]:
        return self.peptides_by_protein.get(accession, frozenset())

    @property
    def n_proteins(self) -> int:
        return len(self.peptides_by_protein)

    @property
    def n_peptides(self) -> int:
        """Distinct peptides summed over proteins."""
        return sum(len(peps) for peps in self.peptides_by_protein.values())


def first_protein_line(reader: LineReader) -> str | None:
    """Consume a protein group up to and including its first protein line.

    Returns the stripped protein line, or None if the group closes without
    listing a protein.
    """
    while True:
        line = reader.require("protein_group").strip()
        if is_closing(line, "protein_group"):
            return None
        if is_element(line, "protein"):
            return line


def _read_protxml(reader: LineReader, collected: dict[str, set[str]]) -> int:
    n_entries = 0
    for line in reader:
        if not is_element(line.strip(), "protein_group"):
            continue
        # only the group's first (representative) protein is used
        protein_line = first_protein_line(reader)
        if protein_line is None:
            continue
        protein = normalize_accession(get_attribute(protein_line, "protein_name") or "")
        peptides = collected.setdefault(protein, set())
        for token in (get_attribute(protein_line, "unique_stripped_peptides") or "").split("+"):
            peptide = normalize_peptide(token)
            if not peptide:
                continue
            n_entries += 1
            peptides.add(peptide)
    return n_entries


def _read_tabular(header_line: str, reader: LineReader, collected: dict[str, set[str]]) -> int:
    header = header_line.split("\t")
    i_protein, i_peptide = locate_columns(header, reader)
    needed = max(i_protein, i_peptide) + 1
    n_entries = 0
    for line in reader:
        if not line:
            continue
        fields = line.split("\t")
        if len(fields) < needed:
            raise reader.error(f"expected at least {needed} fields, found {len(fields)}")
        if len(fields) > len(header):
            raise reader.error(f"row has {len(fields)} fields, header has {len(header)}")
        peptide = normalize_peptide(fields[i_peptide])
        # empty cells and bare modification masses carry no residues
        if not peptide:
            continue
        n_entries += 1
        protein = normalize_accession(fields[i_protein])
        collected.setdefault(protein, set()).add(peptide)
    return n_entries


def build_observation_index(lines: Iterable[str], source: str = "<report>") -> ObservationIndex:
    """
    Read the report once and collect the peptides of every protein.

    Args:
        lines: Report text, one line per item (trailing newlines allowed)
        source: Name used in log messages and errors

    Returns:
        ObservationIndex with the detected shape and per-protein peptide sets

    Raises:
        MalformedRecordError: If the report is empty, a protein group is not
            terminated, or the tabular header lacks a required column
    """
    reader = LineReader(lines, source=source)
    first = reader.first_non_empty()
    if first is None:
        raise reader.error("report is empty")

    shape = detect_report_shape(first)
    collected: dict[str, set[str]] = {}
    if shape is ReportShape.PROTXML:
        n_entries = _read_protxml(reader, collected)
    else:
        n_entries = _read_tabular(first, reader, collected)

    index = ObservationIndex(
        shape=shape,
        peptides_by_protein=MappingProxyType({acc: frozenset(peps) for acc, peps in collected.items()}),
        n_entries=n_entries,
    )
    logger.info(
        f"loaded {index.n_entries} entries corresponding to a total of "
        f"{index.n_proteins} proteins with {index.n_peptides} peptides"
    )
    return index
