#!/usr/bin/env python3
"""
Command-line interface for peptide-tmm using cyclopts.
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import cyclopts
from loguru import logger

from peptide_tmm.config import load_config
from peptide_tmm.errors import ConfigurationError, PeptideTmmError
from peptide_tmm.pipeline import run_peptide_tmm
from peptide_tmm.uniprot import DuplicatePolicy

app = cyclopts.App(
    name="peptide-tmm",
    help="PeptideTransMembraneMapper: annotate ProteinProphet peptides with UniProt transmembrane regions",
)


@dataclass
class _Settings:
    report: Path
    uniprot: list[Path]
    output: Path | None
    log: Path | None
    protein_summary: Path | None
    duplicates: DuplicatePolicy


def _setup_file_logging(log_path: Path) -> int:
    """Configure loguru to also log to a file; returns the handler id."""
    return logger.add(
        log_path,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}",
        level="INFO",
        mode="w",
    )


def _resolve_settings(
    report: Path,
    uniprot: list[Path] | None,
    output: Path | None,
    log: Path | None,
    protein_summary: Path | None,
    duplicates: str | None,
    config: Path | None,
    force: bool,
) -> _Settings:
    """Merge CLI arguments over config-file defaults and validate the inputs."""
    defaults = load_config(config)

    settings = _Settings(
        report=report,
        uniprot=list(uniprot) if uniprot else defaults.uniprot,
        output=output,
        log=log or defaults.log,
        protein_summary=protein_summary or defaults.protein_summary,
        duplicates=DuplicatePolicy(duplicates) if duplicates else defaults.duplicates,
    )

    if not settings.report.exists():
        raise ConfigurationError(f"Report file not found: {settings.report}")
    if not settings.uniprot:
        raise ConfigurationError("At least one UniProt file is required (--uniprot or config 'uniprot')")
    for path in settings.uniprot:
        if not path.exists():
            raise ConfigurationError(f"UniProt file not found: {path}")
    for path in (settings.output, settings.protein_summary):
        if path is not None and path.exists() and not force:
            raise ConfigurationError(f"{path.name} already exists (use --force to overwrite)")
    return settings


@app.default
def main(
    report: Path,
    uniprot: list[Path] | None = None,
    output: Path | None = None,
    log: Path | None = None,
    protein_summary: Path | None = None,
    duplicates: Literal["last", "first", "error"] | None = None,
    config: Path | None = None,
    force: bool = False,
    backend: Literal["auto", "ahocorapy", "ahocorasick_rs"] = "auto",
) -> None:
    """Annotate a ProteinProphet report with UniProt transmembrane regions.

    Args:
        report: ProteinProphet prot.xml or prot.xls file (can be gzipped)
        uniprot: UniProt knowledgebase .dat file(s) (can be gzipped)
        output: Output TSV path (default: stdout)
        log: Log file path (in addition to stderr)
        protein_summary: Optional per-protein summary TSV path
        duplicates: Accession found in several UniProt entries: keep the last, the first, or fail
        config: YAML file with defaults for uniprot, duplicates, log and protein_summary
        force: Overwrite existing output files
        backend: Aho-Corasick backend used for peptide localization
    """
    try:
        settings = _resolve_settings(report, uniprot, output, log, protein_summary, duplicates, config, force)
    except ConfigurationError as e:
        logger.error(f"ERROR: {e}")
        sys.exit(1)

    handler_id = None
    partial = None
    if settings.log is not None:
        handler_id = _setup_file_logging(settings.log)
        logger.info(f"Logging to {settings.log}")

    try:
        if settings.output is None:
            run_peptide_tmm(
                settings.report,
                settings.uniprot,
                sys.stdout,
                duplicates=settings.duplicates,
                protein_summary=settings.protein_summary,
                backend=backend,
            )
        else:
            # the output only appears under its final name once the run succeeded
            partial = settings.output.with_name(settings.output.name + ".partial")
            with open(partial, "w", encoding="utf-8") as out:
                run_peptide_tmm(
                    settings.report,
                    settings.uniprot,
                    out,
                    duplicates=settings.duplicates,
                    protein_summary=settings.protein_summary,
                    backend=backend,
                )
            partial.replace(settings.output)
    except PeptideTmmError as e:
        logger.error(f"ERROR: {e}")
        sys.exit(1)
    else:
        logger.info("Done!")
    finally:
        if partial is not None:
            partial.unlink(missing_ok=True)
        if handler_id is not None:
            logger.remove(handler_id)


if __name__ == "__main__":
    app()
