"""
Pass 2 over the identification report: write the annotated copy.

The output keeps the shape of the input. For protXML one row is written per
peptide element with a fixed header; for tabular reports every input row is
copied (minus its trailing column) and the annotation columns are appended.
"""

from typing import IO, Iterable, Iterator

from loguru import logger

from peptide_tmm.io import LineReader
from peptide_tmm.normalize import normalize_accession, normalize_peptide
from peptide_tmm.observations import ReportShape, detect_report_shape, first_protein_line, locate_columns
from peptide_tmm.results import PEPTIDE_COLUMNS, PROTEIN_COLUMNS, MatchResults
from peptide_tmm.xml_lines import get_attribute, is_closing, is_element

GROUP_ATTRIBUTES = ["group_number", "probability"]
PROTEIN_ATTRIBUTES = ["protein_name", "total_number_peptides", "pct_spectrum_ids", "percent_coverage"]
PEPTIDE_ATTRIBUTES = [
    "peptide_sequence",
    "peptide_sequence",  # replaced by modification_info/@modified_peptide when present
    "charge",
    "nsp_adjusted_probability",
    "n_enzymatic_termini",
    "calc_neutral_pep_mass",
]

PROTXML_HEADER = [
    "group_number",
    "group_probability",
    "protein_name",
    "protein_peptides",
    "protein_pct_spectrum_ids",
    "protein_percent_coverage",
    "peptide_sequence",
    "peptide_sequence_modified",
    "peptide_charge",
    "peptide_nsp_adjusted_probability",
    "peptide_n_enzymatic_termini",
    "peptide_calc_neutral_pep_mass",
    *PROTEIN_COLUMNS,
    *PEPTIDE_COLUMNS,
]
TABULAR_COLUMNS = PEPTIDE_COLUMNS + PROTEIN_COLUMNS


def _attributes(line: str, names: list[str]) -> list[str]:
    return [get_attribute(line, name) or "" for name in names]


def _peptide_rows(reader: LineReader, prefix: list[str], accession: str, results: MatchResults) -> Iterator[list[str]]:
    """Rows for the peptides of one protein, consuming up to ``</protein>``."""
    protein_fields = results.protein_fields(accession)
    while True:
        line = reader.require("protein").strip()
        if is_closing(line, "protein"):
            return
        if not is_element(line, "peptide"):
            continue
        peptide_fields = _attributes(line, PEPTIDE_ATTRIBUTES)
        following = reader.require("peptide").strip()
        if is_element(following, "modification_info"):
            peptide_fields[1] = get_attribute(following, "modified_peptide") or ""
        else:
            reader.push_back(following)
        peptide = normalize_peptide(peptide_fields[0])
        yield prefix + peptide_fields + protein_fields + results.peptide_fields(accession, peptide)


def _annotate_protxml(reader: LineReader, results: MatchResults) -> Iterator[list[str]]:
    yield list(PROTXML_HEADER)
    for line in reader:
        line = line.strip()
        if not is_element(line, "protein_group"):
            continue
        group_fields = _attributes(line, GROUP_ATTRIBUTES)
        protein_line = first_protein_line(reader)
        if protein_line is None:
            continue
        protein_fields = _attributes(protein_line, PROTEIN_ATTRIBUTES)
        accession = normalize_accession(protein_fields[0])
        yield from _peptide_rows(reader, group_fields + protein_fields, accession, results)


def _annotate_tabular(header_line: str, reader: LineReader, results: MatchResults) -> Iterator[list[str]]:
    header = header_line.split("\t")
    i_protein, i_peptide = locate_columns(header, reader)
    yield header[:-1] + TABULAR_COLUMNS
    for line in reader:
        if not line:
            continue
        fields = line.split("\t")
        if len(fields) > len(header):
            raise reader.error(f"row has {len(fields)} fields, header has {len(header)}")
        # trailing empty fields may have been trimmed
        fields += [""] * (len(header) - len(fields))
        accession = normalize_accession(fields[i_protein])
        peptide = normalize_peptide(fields[i_peptide])
        yield fields[:-1] + results.peptide_fields(accession, peptide) + results.protein_fields(accession)


def annotate_report(
    lines: Iterable[str],
    results: MatchResults,
    shape: ReportShape,
    source: str = "<report>",
) -> Iterator[list[str]]:
    """
    Re-read the report and yield the annotated output rows, header first.

    Args:
        lines: Report text (the same report indexed in pass 1)
        results: Per-protein results of the UniProt scan
        shape: Report shape detected in pass 1
        source: Name used in errors

    Yields:
        Output rows as lists of strings; missing values are empty strings

    Raises:
        MalformedRecordError: If the report is empty, has a different shape
            than in pass 1, or is structurally broken
    """
    reader = LineReader(lines, source=source)
    first = reader.first_non_empty()
    if first is None:
        raise reader.error("report is empty")
    if detect_report_shape(first) is not shape:
        raise reader.error(f"report is no longer in {shape.value} format")

    if shape is ReportShape.PROTXML:
        yield from _annotate_protxml(reader, results)
    else:
        yield from _annotate_tabular(first, reader, results)


def write_rows(rows: Iterable[list[str]], stream: IO[str]) -> int:
    """Write tab-separated rows; returns the number of rows after the header."""
    n_rows = -1
    for row in rows:
        stream.write("\t".join("" if value is None else str(value) for value in row))
        stream.write("\n")
        n_rows += 1
    n_rows = max(n_rows, 0)
    logger.debug(f"wrote {n_rows} rows")
    return n_rows
