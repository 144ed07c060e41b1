"""
Multi-pattern peptide search over protein sequences.

All peptides observed for a protein are compiled into a single Aho-Corasick
automaton and the protein sequence is scanned once. Two backends are
supported:

- ahocorapy: pure Python, always installed
- ahocorasick_rs: Rust extension, used when the ``fast`` extra is installed

Usage:
    from peptide_tmm.ahocorasick import create_automaton

    automaton = create_automaton(peptides)
    starts = automaton.first_occurrences(sequence)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Iterator


@dataclass(frozen=True, slots=True)
class Hit:
    """One occurrence of a peptide in a sequence (0-based start)."""

    keyword: str
    start: int


class PeptideAutomaton(ABC):
    """Common interface of the automaton backends."""

    @abstractmethod
    def find_all(self, text: str) -> Iterator[Hit]:
        """Yield every (possibly overlapping) keyword occurrence in ``text``."""
        ...

    def first_occurrences(self, text: str) -> dict[str, int]:
        """Map each keyword found in ``text`` to its leftmost 0-based start.

        Keywords that do not occur are absent from the result.
        """
        first: dict[str, int] = {}
        for hit in self.find_all(text):
            if hit.keyword not in first or hit.start < first[hit.keyword]:
                first[hit.keyword] = hit.start
        return first


class KeywordTreeAutomaton(PeptideAutomaton):
    """ahocorapy backend."""

    def __init__(self, keywords: Iterable[str]):
        from ahocorapy.keywordtree import KeywordTree

        self._tree = KeywordTree()
        for keyword in keywords:
            self._tree.add(keyword)
        self._tree.finalize()

    def find_all(self, text: str) -> Iterator[Hit]:
        for keyword, start in self._tree.search_all(text):
            yield Hit(keyword=keyword, start=start)


class RustAutomaton(PeptideAutomaton):
    """ahocorasick_rs backend."""

    def __init__(self, keywords: Iterable[str]):
        import ahocorasick_rs

        self._keywords = list(keywords)
        self._ac = ahocorasick_rs.AhoCorasick(self._keywords)

    def find_all(self, text: str) -> Iterator[Hit]:
        for idx, start, _ in self._ac.find_matches_as_indexes(text, overlapping=True):
            yield Hit(keyword=self._keywords[idx], start=start)


def create_automaton(keywords: Iterable[str], backend: str = "auto") -> PeptideAutomaton:
    """
    Build an automaton for the given peptides.

    Args:
        keywords: Peptide sequences to search for
        backend: "auto" (Rust if importable, else pure Python),
            "ahocorapy" or "ahocorasick_rs"

    Returns:
        PeptideAutomaton implementation

    Raises:
        ImportError: If "ahocorasick_rs" is requested but not installed
        ValueError: If the backend name is unknown
    """
    keywords = list(keywords)

    if backend == "ahocorasick_rs":
        return RustAutomaton(keywords)
    if backend == "ahocorapy":
        return KeywordTreeAutomaton(keywords)
    if backend != "auto":
        raise ValueError(f"Unknown automaton backend: {backend}")

    if "ahocorasick_rs" in get_available_backends():
        return RustAutomaton(keywords)
    return KeywordTreeAutomaton(keywords)


def get_available_backends() -> list[str]:
    """Names of the backends that can be passed to create_automaton()."""
    backends = ["ahocorapy"]
    try:
        import ahocorasick_rs  # noqa: F401

        backends.append("ahocorasick_rs")
    except ImportError:
        pass
    return backends
