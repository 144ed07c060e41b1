"""
peptide_tmm - map proteomics peptide identifications onto transmembrane regions.

Joins a ProteinProphet report (protXML or its tab-separated export) with
UniProt knowledgebase flat files and annotates every peptide with the number
of its residues that fall into annotated TRANSMEM regions, together with
per-protein sequence and TM coverage.

Example:
    >>> from peptide_tmm import build_observation_index, scan_uniprot, annotate_report
    >>>
    >>> with open("interact.prot.xls") as f:
    ...     index = build_observation_index(f)
    >>> results, stats = scan_uniprot(["uniprot_sprot.dat.gz"], index)
    >>> with open("interact.prot.xls") as f:
    ...     rows = list(annotate_report(f, results, index.shape))
"""

from peptide_tmm.annotate import annotate_report, write_rows
from peptide_tmm.matcher import PeptideMatch, ProteinCoverage, ProteinFeatures, ProteinResult, match_protein
from peptide_tmm.normalize import normalize_accession, normalize_peptide
from peptide_tmm.observations import ObservationIndex, ReportShape, build_observation_index
from peptide_tmm.pipeline import RunStats, run_peptide_tmm
from peptide_tmm.results import MatchResults
from peptide_tmm.uniprot import DuplicatePolicy, scan_uniprot

__all__ = [
    "annotate_report",
    "build_observation_index",
    "DuplicatePolicy",
    "match_protein",
    "MatchResults",
    "normalize_accession",
    "normalize_peptide",
    "ObservationIndex",
    "PeptideMatch",
    "ProteinCoverage",
    "ProteinFeatures",
    "ProteinResult",
    "ReportShape",
    "run_peptide_tmm",
    "RunStats",
    "scan_uniprot",
    "write_rows",
]

__version__ = "0.1.0"
