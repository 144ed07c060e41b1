"""Optional YAML file with run defaults.

Example ``peptide_tmm.yml``::

    uniprot:
      - /data/uniprot/uniprot_sprot.dat.gz
      - /data/uniprot/uniprot_trembl.dat.gz
    duplicates: last
    log: peptide_tmm.log
"""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from peptide_tmm.errors import ConfigurationError
from peptide_tmm.uniprot import DuplicatePolicy

KNOWN_KEYS = {"uniprot", "duplicates", "log", "protein_summary"}


@dataclass
class RunConfig:
    """Defaults read from a config file; CLI arguments take precedence."""

    uniprot: list[Path] = field(default_factory=list)
    duplicates: DuplicatePolicy = DuplicatePolicy.LAST
    log: Path | None = None
    protein_summary: Path | None = None


def load_config(path: Path | None) -> RunConfig:
    """Read a YAML config file; returns plain defaults when ``path`` is None."""
    if path is None:
        return RunConfig()
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    unknown = set(data) - KNOWN_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown config key(s) in {path}: {', '.join(sorted(unknown))}")

    uniprot = data.get("uniprot", [])
    if isinstance(uniprot, str):
        uniprot = [uniprot]

    try:
        duplicates = DuplicatePolicy(data.get("duplicates", DuplicatePolicy.LAST.value))
    except ValueError:
        choices = ", ".join(p.value for p in DuplicatePolicy)
        raise ConfigurationError(f"duplicates must be one of {choices}, got {data['duplicates']!r}") from None

    log = data.get("log")
    protein_summary = data.get("protein_summary")
    return RunConfig(
        uniprot=[Path(p) for p in uniprot],
        duplicates=duplicates,
        log=Path(log) if log else None,
        protein_summary=Path(protein_summary) if protein_summary else None,
    )
