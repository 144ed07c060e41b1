"""Read-only view of the per-protein results produced by the UniProt scan."""

from dataclasses import dataclass
from typing import Iterator, Mapping

from peptide_tmm.matcher import PeptideMatch, ProteinResult

PROTEIN_COLUMNS = [
    "proteinID",
    "protein_transmemRegions",
    "protein_AA",
    "protein_AA_covered",
    "protein_AA_transmem",
    "protein_AA_transmem_covered",
]
PEPTIDE_COLUMNS = ["peptide_AA", "peptide_AA_transmem"]


@dataclass(frozen=True)
class MatchResults:
    """Accession -> ProteinResult, plus the column values written to reports.

    Missing values are always empty strings, never zeros, so that "not
    annotated" stays distinguishable from "annotated with a count of 0".
    """

    proteins: Mapping[str, ProteinResult]

    def __len__(self) -> int:
        return len(self.proteins)

    def __iter__(self) -> Iterator[str]:
        return iter(self.proteins)

    def __contains__(self, accession: str) -> bool:
        return accession in self.proteins

    def get(self, accession: str) -> ProteinResult | None:
        return self.proteins.get(accession)

    def peptide_match(self, accession: str, peptide: str) -> PeptideMatch | None:
        result = self.proteins.get(accession)
        if result is None:
            return None
        return result.matches.get(peptide)

    def protein_fields(self, accession: str) -> list[str]:
        """Values for PROTEIN_COLUMNS."""
        result = self.proteins.get(accession)
        if result is None:
            return [""] * len(PROTEIN_COLUMNS)
        features = result.features
        fields = [accession, str(features.tm_region_count), str(features.length), str(result.coverage.n_covered)]
        if features.has_tm_regions:
            fields += [str(features.tm_residue_count), str(result.coverage.n_covered_tm)]
        else:
            fields += ["", ""]
        return fields

    def peptide_fields(self, accession: str, peptide: str) -> list[str]:
        """Values for PEPTIDE_COLUMNS."""
        match = self.peptide_match(accession, peptide)
        if match is None:
            return [""] * len(PEPTIDE_COLUMNS)
        return [str(match.length), str(match.tm_overlap)]

    def to_dataframe(self):
        """Per-protein summary table.

        Returns:
            DataFrame with PROTEIN_COLUMNS plus n_peptides and
            n_peptides_transmem; TM columns are NA for proteins without TM
            regions
        """
        import pandas as pd

        rows = []
        for accession, result in self.proteins.items():
            features = result.features
            rows.append(
                {
                    "proteinID": accession,
                    "protein_transmemRegions": features.tm_region_count,
                    "protein_AA": features.length,
                    "protein_AA_covered": result.coverage.n_covered,
                    "protein_AA_transmem": features.tm_residue_count if features.has_tm_regions else pd.NA,
                    "protein_AA_transmem_covered": result.coverage.n_covered_tm if features.has_tm_regions else pd.NA,
                    "n_peptides": len(result.matches),
                    "n_peptides_transmem": result.n_matches_tm,
                }
            )
        df = pd.DataFrame(rows, columns=PROTEIN_COLUMNS + ["n_peptides", "n_peptides_transmem"])
        for column in ("protein_AA_transmem", "protein_AA_transmem_covered"):
            df[column] = df[column].astype("Int64")
        return df
