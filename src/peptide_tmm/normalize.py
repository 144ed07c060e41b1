"""
Identifier normalization shared by the report and UniProt parsers.

Both inputs refer to proteins and peptides in slightly different ways, so
every identifier is reduced to a canonical key before it is used for joining:

- accessions lose database prefixes (``sp|P12345|NAME`` -> ``P12345``) and
  isoform suffixes (``P12345-2`` -> ``P12345``)
- peptides lose modification masses (``M[147.0]`` -> ``M``) and isoleucine is
  folded onto leucine, which mass spectrometry cannot tell apart
"""

import re

_ISOFORM_SUFFIX = re.compile(r"(?:-\d+)+$")
_MODIFICATION = re.compile(r"\[[0-9.]+\]")


def normalize_accession(raw: str) -> str:
    """Reduce a protein identifier to its bare accession.

    Examples:
        >>> normalize_accession("sp|P12345-2|PROT_HUMAN")
        'P12345'
        >>> normalize_accession("Q99999,P11111")
        'Q99999'
    """
    accession = raw.split(",", 1)[0]
    if accession.lower().startswith(("sp|", "tr|")):
        accession = accession.split("|")[1]
    return _ISOFORM_SUFFIX.sub("", accession)


def normalize_peptide(raw: str) -> str:
    """Uppercase, strip modification masses and fold I onto L.

    Examples:
        >>> normalize_peptide("pepM[147.035]IDE")
        'PEPMLDE'
    """
    return _MODIFICATION.sub("", raw.upper()).replace("I", "L")


def normalize_sequence(raw: str) -> str:
    """Normalize a protein sequence the same way peptides are normalized."""
    return raw.upper().replace("I", "L")
