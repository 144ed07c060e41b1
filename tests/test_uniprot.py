"""Tests for the UniProt flat-file scanner."""

import gzip
import io

import pytest

from peptide_tmm.errors import DuplicateAccessionError, MalformedRecordError
from peptide_tmm.io import LineReader
from peptide_tmm.observations import build_observation_index
from peptide_tmm.uniprot import (
    DuplicatePolicy,
    UniprotScanner,
    parse_transmem_range,
    read_entries,
    scan_uniprot,
)


@pytest.fixture
def index(protxml_text):
    return build_observation_index(io.StringIO(protxml_text))


def _entries(text, wanted):
    return list(read_entries(LineReader(io.StringIO(text)), wanted))


class TestParseTransmem:
    @pytest.mark.parametrize(
        "line, expected",
        [
            ("FT   TRANSMEM        5..10", range(5, 11)),
            ("FT   TRANSMEM     10     30       Helical.", range(10, 31)),
            ("FT   TRANSMEM        <1..4", range(1, 5)),
            ("FT   TRANSMEM        7", range(7, 8)),
        ],
    )
    def test_layouts(self, line, expected):
        assert parse_transmem_range(line, LineReader([])) == expected

    def test_unknown_boundary(self):
        assert parse_transmem_range("FT   TRANSMEM        ?..30", LineReader([])) is None

    def test_invalid_position(self):
        with pytest.raises(MalformedRecordError):
            parse_transmem_range("FT   TRANSMEM        abc..30", LineReader([]))


class TestReadEntries:
    def test_only_wanted_entries(self, uniprot_text):
        entries = _entries(uniprot_text, {"P1", "Q2"})
        assert [e.accessions for e in entries] == [("P1",), ("Q2",)]

    def test_sequence_and_tm(self, uniprot_text):
        entry = _entries(uniprot_text, {"P1"})[0]
        assert entry.sequence == "XAAAXBBBXX"
        assert entry.tm_positions == frozenset(range(5, 11))
        assert entry.tm_region_count == 1

    def test_sequence_spaces_removed_and_normalized(self, uniprot_text):
        entry = _entries(uniprot_text, {"Q2"})[0]
        assert entry.sequence == "MKLMNSTTT"
        assert entry.tm_region_count == 0

    def test_entry_matching_several_accessions(self, uniprot_text):
        entry = _entries(uniprot_text, {"P1", "P1B"})[0]
        assert entry.accessions == ("P1", "P1B")

    def test_continued_ac_lines(self):
        text = "ID   X\nAC   P5; P6;\nAC   P7;\nSQ   SEQUENCE\n     MKK\n//\n"
        entries = _entries(text, {"P7"})
        assert entries[0].accessions == ("P7",)
        assert entries[0].sequence == "MKK"

    def test_unterminated_entry(self):
        text = "ID   X\nAC   P5;\nSQ   SEQUENCE\n     MKK\n"
        with pytest.raises(MalformedRecordError, match="//"):
            _entries(text, {"P5"})

    def test_unknown_tm_boundary_counts_region(self, log_messages):
        text = "AC   P5;\nFT   TRANSMEM        ?..3\nFT   TRANSMEM        5..6\n     MKKKKK\n//\n"
        entry = _entries(text, {"P5"})[0]
        assert entry.tm_region_count == 2
        assert entry.tm_positions == {5, 6}
        assert any(r["level"].name == "WARNING" for r in log_messages)


class TestUniprotScanner:
    def test_results(self, index, uniprot_text):
        scanner = UniprotScanner(index)
        scanner.scan_lines(io.StringIO(uniprot_text))
        results = scanner.results()

        assert set(results) == {"P1", "Q2"}
        p1 = results.get("P1")
        assert p1.features.length == 10
        assert p1.matches["BBB"].tm_overlap == 3
        assert p1.coverage.n_covered == 6
        assert p1.coverage.n_covered_tm == 3

    def test_stats(self, index, uniprot_text):
        scanner = UniprotScanner(index)
        scanner.scan_lines(io.StringIO(uniprot_text))
        scanner.results()
        stats = scanner.stats
        assert stats.entries_matched == 2
        assert stats.proteins_matched == 2
        assert stats.proteins_with_tm == 1
        assert stats.peptides_matched == 3
        assert stats.peptides_with_tm == 1
        assert stats.peptides_unmatched == 1


class TestDuplicates:
    FIRST = "AC   P1;\n     AAAXXXXXXX\n//\n"
    SECOND = "AC   P1;\nFT   TRANSMEM        1..3\n     XXXXXXXAAA\n//\n"

    def _scan(self, index, policy):
        scanner = UniprotScanner(index, duplicates=policy)
        scanner.scan_lines(io.StringIO(self.FIRST), source="sprot")
        scanner.scan_lines(io.StringIO(self.SECOND), source="trembl")
        return scanner.results()

    def test_last_wins_by_default(self, index):
        results = self._scan(index, DuplicatePolicy.LAST)
        assert results.peptide_match("P1", "AAA").start == 8
        assert results.get("P1").features.tm_region_count == 1

    def test_first_wins(self, index):
        results = self._scan(index, DuplicatePolicy.FIRST)
        assert results.peptide_match("P1", "AAA").start == 1

    def test_error(self, index):
        with pytest.raises(DuplicateAccessionError, match="P1"):
            self._scan(index, DuplicatePolicy.ERROR)

    def test_policy_from_string(self, index):
        assert UniprotScanner(index, duplicates="first").duplicates is DuplicatePolicy.FIRST


class TestScanUniprot:
    def test_files_in_order_and_gzip(self, index, uniprot_text, tmp_path):
        sprot = tmp_path / "uniprot_sprot.dat"
        sprot.write_text(uniprot_text.split("ID   Q2_HUMAN")[0])
        trembl = tmp_path / "uniprot_trembl.dat.gz"
        with gzip.open(trembl, "wt") as f:
            f.write("ID   Q2_HUMAN" + uniprot_text.split("ID   Q2_HUMAN")[1])

        results, stats = scan_uniprot([sprot, trembl], index)

        assert set(results) == {"P1", "Q2"}
        assert stats.entries_matched == 2
