"""
Run the three stages in order: index the report, scan UniProt, annotate.

Each stage returns an immutable object that is handed to the next one;
nothing is shared between stages otherwise.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable

from loguru import logger

from peptide_tmm.annotate import annotate_report, write_rows
from peptide_tmm.io import open_text
from peptide_tmm.observations import build_observation_index
from peptide_tmm.uniprot import DuplicatePolicy, scan_uniprot


@dataclass
class RunStats:
    """Counts collected over a complete run."""

    # Report
    entries: int
    proteins: int
    peptides: int

    # UniProt matching
    entries_matched: int
    proteins_matched: int
    proteins_with_tm: int
    peptides_matched: int
    peptides_with_tm: int
    peptides_unmatched: int

    # Output
    rows_written: int


def _log_summary(stats: RunStats, report_path: Path, uniprot_paths: list[Path]) -> None:
    logger.info("=" * 60)
    logger.info("PEPTIDE TRANSMEMBRANE MAPPING SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Input report:        {report_path}")
    for path in uniprot_paths:
        logger.info(f"UniProt database:    {path}")
    logger.info("-" * 60)
    logger.info(f"Report entries:      {stats.entries:,}")
    logger.info(f"Proteins:            {stats.proteins:,}")
    logger.info(f"Peptides:            {stats.peptides:,}")
    logger.info("-" * 60)
    logger.info(f"UniProt entries matched:       {stats.entries_matched:,}")
    logger.info(f"  Proteins with TM regions:    {stats.proteins_with_tm:,}")
    logger.info(f"Peptides localized:            {stats.peptides_matched:,}")
    logger.info(f"  Intersecting a TM region:    {stats.peptides_with_tm:,}")
    logger.info(f"  Not found in their protein:  {stats.peptides_unmatched:,}")
    logger.info(f"Proteins without UniProt entry: {stats.proteins - stats.proteins_matched:,}")
    logger.info("-" * 60)
    logger.info(f"Rows written:        {stats.rows_written:,}")
    logger.info("=" * 60)


def run_peptide_tmm(
    report_path: str | Path,
    uniprot_paths: Iterable[str | Path],
    output: IO[str],
    duplicates: DuplicatePolicy = DuplicatePolicy.LAST,
    protein_summary: str | Path | None = None,
    backend: str = "auto",
) -> RunStats:
    """Annotate a ProteinProphet report with UniProt transmembrane regions.

    Args:
        report_path: protXML or tab-separated report (can be gzipped)
        uniprot_paths: UniProt .dat files, scanned in order (can be gzipped)
        output: Stream receiving the annotated report
        duplicates: Policy for accessions found in more than one UniProt entry
        protein_summary: Optional TSV path for the per-protein summary table
        backend: Automaton backend used for peptide localization

    Returns:
        RunStats with counts from all stages
    """
    report_path = Path(report_path)
    uniprot_paths = [Path(p) for p in uniprot_paths]

    logger.info(f"reading input file {report_path.name}")
    with open_text(report_path) as f:
        index = build_observation_index(f, source=report_path.name)
    logger.info(f"report format: {index.shape.value}")

    results, scan_stats = scan_uniprot(uniprot_paths, index, duplicates=duplicates, backend=backend)

    logger.info("writing output file...")
    with open_text(report_path) as f:
        rows_written = write_rows(annotate_report(f, results, index.shape, source=report_path.name), output)

    if protein_summary is not None:
        logger.info(f"writing protein summary to {protein_summary}")
        results.to_dataframe().to_csv(protein_summary, sep="\t", index=False)

    stats = RunStats(
        entries=index.n_entries,
        proteins=index.n_proteins,
        peptides=index.n_peptides,
        entries_matched=scan_stats.entries_matched,
        proteins_matched=scan_stats.proteins_matched,
        proteins_with_tm=scan_stats.proteins_with_tm,
        peptides_matched=scan_stats.peptides_matched,
        peptides_with_tm=scan_stats.peptides_with_tm,
        peptides_unmatched=scan_stats.peptides_unmatched,
        rows_written=rows_written,
    )
    _log_summary(stats, report_path, uniprot_paths)
    return stats
