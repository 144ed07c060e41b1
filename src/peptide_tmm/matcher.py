"""
Peptide localization and transmembrane overlap.

Every peptide of a protein is placed at its first occurrence in the protein
sequence. Residues are numbered from 1, matching UniProt feature positions.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from loguru import logger

from peptide_tmm.ahocorasick import create_automaton


@dataclass(frozen=True, slots=True)
class ProteinFeatures:
    """Sequence and transmembrane annotation of one UniProt entry."""

    accession: str
    sequence: str
    tm_positions: frozenset[int] = frozenset()
    tm_region_count: int = 0

    @property
    def length(self) -> int:
        return len(self.sequence)

    @property
    def tm_residue_count(self) -> int:
        """Number of residues inside any TM region."""
        return len(self.tm_positions)

    @property
    def has_tm_regions(self) -> bool:
        return self.tm_region_count > 0


@dataclass(frozen=True, slots=True)
class PeptideMatch:
    """Placement of a peptide in its protein (1-based, inclusive)."""

    peptide: str
    start: int
    end: int
    tm_overlap: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def residues(self) -> range:
        return range(self.start, self.end + 1)


@dataclass(frozen=True, slots=True)
class ProteinCoverage:
    """Residues spanned by the localized peptides of a protein."""

    covered_residues: frozenset[int] = frozenset()
    covered_tm_residues: frozenset[int] = frozenset()

    @property
    def n_covered(self) -> int:
        return len(self.covered_residues)

    @property
    def n_covered_tm(self) -> int:
        return len(self.covered_tm_residues)


@dataclass(frozen=True)
class ProteinResult:
    """Everything computed for one accession."""

    features: ProteinFeatures
    matches: Mapping[str, PeptideMatch] = field(default_factory=dict)
    coverage: ProteinCoverage = ProteinCoverage()
    unmatched: frozenset[str] = frozenset()

    @property
    def n_matches_tm(self) -> int:
        """Localized peptides with at least one residue in a TM region."""
        return sum(1 for m in self.matches.values() if m.tm_overlap > 0)


def locate_peptides(sequence: str, peptides: Iterable[str], backend: str = "auto") -> dict[str, int]:
    """Return the 1-based first-occurrence start of every peptide found in ``sequence``."""
    peptides = [p for p in set(peptides) if p]
    if not peptides or not sequence:
        return {}
    automaton = create_automaton(peptides, backend=backend)
    return {pep: start + 1 for pep, start in automaton.first_occurrences(sequence).items()}


def match_protein(
    features: ProteinFeatures,
    peptides: Iterable[str],
    backend: str = "auto",
) -> ProteinResult:
    """
    Localize peptides in a protein and measure their transmembrane overlap.

    Peptides that do not occur in the sequence are logged and left out of all
    counts; they are reported in ``ProteinResult.unmatched``. Empty peptide
    keys carry no residues and are ignored.

    Args:
        features: Normalized sequence and TM positions of the protein
        peptides: Normalized peptide sequences observed for the protein
        backend: Automaton backend, see create_automaton()

    Returns:
        ProteinResult with per-peptide matches and the coverage union

    Example:
        >>> features = ProteinFeatures("P1", "XAAAXBBBXX", frozenset(range(5, 11)), 1)
        >>> result = match_protein(features, {"AAA", "BBB"})
        >>> result.matches["BBB"].tm_overlap
        3
        >>> result.coverage.n_covered
        6
    """
    peptides = {p for p in peptides if p}
    starts = locate_peptides(features.sequence, peptides, backend=backend)

    matches: dict[str, PeptideMatch] = {}
    covered: set[int] = set()
    covered_tm: set[int] = set()
    unmatched = []
    for peptide in sorted(peptides):
        if peptide not in starts:
            logger.warning(
                f"could not find peptide {peptide} in protein {features.accession}, skipping this peptide..."
            )
            unmatched.append(peptide)
            continue
        start = starts[peptide]
        span = range(start, start + len(peptide))
        in_tm = features.tm_positions.intersection(span)
        covered.update(span)
        covered_tm.update(in_tm)
        matches[peptide] = PeptideMatch(peptide=peptide, start=span.start, end=span.stop - 1, tm_overlap=len(in_tm))

    return ProteinResult(
        features=features,
        matches=MappingProxyType(matches),
        coverage=ProteinCoverage(frozenset(covered), frozenset(covered_tm)),
        unmatched=frozenset(unmatched),
    )
