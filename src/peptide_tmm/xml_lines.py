"""
Attribute extraction from single protXML lines.

ProteinProphet writes one element per line, so the report is read line by
line and attributes are pulled out of the element text directly. This is not
an XML parser: entities are not decoded and elements spanning several lines
are not supported.
"""

import re
from functools import lru_cache


@lru_cache(maxsize=64)
def _attribute_pattern(name: str) -> re.Pattern:
    return re.compile(r"(?:^|[\s<])" + re.escape(name) + r"""\s*=\s*(["'])(.*?)\1""")


def get_attribute(line: str, name: str) -> str | None:
    """Return the value of attribute ``name`` on ``line``, or None if absent.

    Double and single quotes are accepted, with optional whitespace around
    the equals sign.

    Examples:
        >>> get_attribute('<protein protein_name="sp|P1|X" probability="1.00">', "protein_name")
        'sp|P1|X'
        >>> get_attribute("<peptide charge = '2'>", "charge")
        '2'
    """
    match = _attribute_pattern(name).search(line)
    return match.group(2) if match else None


def is_element(line: str, tag: str) -> bool:
    """True if the (stripped) line opens element ``tag``."""
    return line.startswith(f"<{tag} ") or line.startswith(f"<{tag}>")


def is_closing(line: str, tag: str) -> bool:
    """True if the (stripped) line closes element ``tag``."""
    return line == f"</{tag}>"
