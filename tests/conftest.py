"""Shared fixtures: a small protXML report, its tabular export and a UniProt file."""

import sys
from pathlib import Path

import pytest
from loguru import logger

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

PROTXML = """<?xml version="1.0" encoding="UTF-8"?>
<protein_summary xmlns="http://regis-web.systemsbiology.net/protXML" summary_xml="interact.prot.xml">
<protein_summary_header reference_database="uniprot.fasta" min_peptide_probability="0.05">
<program_details analysis="proteinprophet" time="2013-07-22T10:00:00" version="4.6">
</program_details>
</protein_summary_header>
<protein_group group_number="1" probability="1.0000">
<protein protein_name="sp|P1|PROT1_HUMAN" n_indistinguishable_proteins="1" probability="1.0000" percent_coverage="60.0" unique_stripped_peptides="AAA+BBB" group_sibling_id="a" total_number_peptides="3" pct_spectrum_ids="1.5">
<annotation protein_description="Protein one"/>
<peptide peptide_sequence="AAA" charge="2" initial_probability="0.99" nsp_adjusted_probability="0.998" weight="1.00" n_enzymatic_termini="2" n_instances="1" calc_neutral_pep_mass="215.1">
</peptide>
<peptide peptide_sequence="BBB" charge="3" initial_probability="0.95" nsp_adjusted_probability="0.970" weight="1.00" n_enzymatic_termini="2" n_instances="1" calc_neutral_pep_mass="300.2">
<modification_info modified_peptide="BB[123.4]B"/>
</peptide>
<peptide peptide_sequence="BBB" charge="2" initial_probability="0.90" nsp_adjusted_probability="0.950" weight="1.00" n_enzymatic_termini="1" n_instances="1" calc_neutral_pep_mass="300.2">
</peptide>
</protein>
<protein protein_name="sp|P9|SIBLING_HUMAN" n_indistinguishable_proteins="1" probability="0.5000" percent_coverage="10.0" unique_stripped_peptides="CCC" group_sibling_id="b" total_number_peptides="1" pct_spectrum_ids="0.1">
<peptide peptide_sequence="CCC" charge="2" nsp_adjusted_probability="0.5" n_enzymatic_termini="2" calc_neutral_pep_mass="100.0">
</peptide>
</protein>
</protein_group>
<protein_group group_number="2" probability="0.9900">
<protein protein_name="tr|Q2-2|Q2_HUMAN" n_indistinguishable_proteins="1" probability="0.9900" percent_coverage="44.4" unique_stripped_peptides="KIMN+WWW" group_sibling_id="a" total_number_peptides="2" pct_spectrum_ids="0.8">
<peptide peptide_sequence="KIMN" charge="2" nsp_adjusted_probability="0.990" n_enzymatic_termini="1" calc_neutral_pep_mass="500.3">
</peptide>
<peptide peptide_sequence="WWW" charge="2" nsp_adjusted_probability="0.900" n_enzymatic_termini="0" calc_neutral_pep_mass="570.2">
</peptide>
</protein>
</protein_group>
<protein_group group_number="3" probability="0.8000">
<protein protein_name="sp|P3|MISSING_HUMAN" n_indistinguishable_proteins="1" probability="0.8000" percent_coverage="5.0" unique_stripped_peptides="DDD" group_sibling_id="a" total_number_peptides="1" pct_spectrum_ids="0.2">
<peptide peptide_sequence="DDD" charge="2" nsp_adjusted_probability="0.800" n_enzymatic_termini="2" calc_neutral_pep_mass="330.1">
</peptide>
</protein>
</protein_group>
</protein_summary>
"""

TABULAR = (
    "entry no.\tprotein\tprotein probability\tpeptide sequence\tcharge\t\n"
    "1\tsp|P1|PROT1_HUMAN\t1.0000\tAAA\t2\t\n"
    "1\tsp|P1|PROT1_HUMAN\t1.0000\tBB[123.4]B\t3\t\n"
    "2\ttr|Q2-2|Q2_HUMAN,tr|Q5|Q5_HUMAN\t0.9900\tKIMN\t2\t\n"
    "2\ttr|Q2-2|Q2_HUMAN,tr|Q5|Q5_HUMAN\t0.9900\tWWW\t2\t\n"
    "\n"
    "3\tsp|P3|MISSING_HUMAN\t0.8000\tDDD\t2\t\n"
)

UNIPROT = """ID   PROT1_HUMAN             Reviewed;          10 AA.
AC   P1; P1B;
DT   01-JAN-2000, integrated into UniProtKB/Swiss-Prot.
DE   RecName: Full=Protein one;
FT   TOPO_DOM        1..4
FT                   /note="Cytoplasmic"
FT   TRANSMEM        5..10
FT                   /note="Helical"
SQ   SEQUENCE   10 AA;  1111 MW;  0000000000000000 CRC64;
     XAAAXBBBXX
//
ID   UNRELATED_HUMAN         Reviewed;           5 AA.
AC   P77;
FT   TRANSMEM        1..3
SQ   SEQUENCE   5 AA;  555 MW;  0000000000000000 CRC64;
     MMMMM
//
ID   Q2_HUMAN                Unreviewed;          9 AA.
AC   Q2;
SQ   SEQUENCE   9 AA;  999 MW;  0000000000000000 CRC64;
     MKIMN STTT
//
"""


@pytest.fixture
def protxml_text():
    return PROTXML


@pytest.fixture
def tabular_text():
    return TABULAR


@pytest.fixture
def uniprot_text():
    return UNIPROT


@pytest.fixture
def data_dir(tmp_path):
    """Write the sample inputs to a temporary directory."""
    (tmp_path / "interact.prot.xml").write_text(PROTXML)
    (tmp_path / "interact.prot.xls").write_text(TABULAR)
    (tmp_path / "uniprot_sprot.dat").write_text(UNIPROT)
    return tmp_path


@pytest.fixture
def log_messages():
    """Collect loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
