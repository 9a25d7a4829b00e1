"""
Test configuration and fixtures for cdhit-clstr.

This module provides common test fixtures and configuration for the test suite.
"""

import io
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from cdhit_clstr.config.settings import Settings, get_settings
from cdhit_clstr.core.types import Cluster, ClusterMember, Identity


SAMPLE_CLSTR = (
    ">Cluster 0\n"
    "0\t304aa, >seq1... *\n"
    "1\t300aa, >seq2... at 99.7%\n"
    ">Cluster 1\n"
    "0\t150aa, >seq3... *\n"
)

# Excerpt of a CD-HIT report over UniProt ids with four-space separators.
# Cluster 1 has no representative in this excerpt.
UNIPROT_CLSTR = (
    ">Cluster 0\n"
    "0    4481aa, >sp|P0C6T5|R1A_BCHK5... at 99.89%\n"
    "1    7126aa, >sp|P0C6W1|R1AB_BC133... at 66.94%\n"
    "2    7119aa, >sp|P0C6W3|R1AB_BCHK4... at 67.17%\n"
    "3    7182aa, >sp|P0C6W4|R1AB_BCHK5... *\n"
    "4    307aa, >sp|Q9WQ77|R1AB_CVRSD... at 76.22%\n"
    ">Cluster 1\n"
    "0    4471aa, >sp|P0C6U3|R1A_CVHN1... at 99.91%\n"
    "1    4441aa, >sp|P0C6U4|R1A_CVHN2... at 81.47%\n"
    "2    4421aa, >sp|P0C6U5|R1A_CVHN5... at 81.52%\n"
)

# Output of a 2-d nucleotide run mixing every identity notation.
TWO_D_CLSTR = (
    ">Cluster 0\n"
    "0\t1200nt, >contig_1.a... *\n"
    "1\t1180nt, >contig_2... at 99.9%/100%\n"
    "2\t1175nt, >contig_3... at -/100.00%\n"
    "3\t1170nt, >contig_4... at 98.50%/-\n"
    ">Cluster 1\n"
    "0\t900nt, >contig_5... *\n"
    "1\t880nt, >contig_6... at 95%\n"
)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def sample_clstr_text() -> str:
    return SAMPLE_CLSTR


@pytest.fixture
def two_d_clstr_text() -> str:
    return TWO_D_CLSTR


@pytest.fixture
def uniprot_clstr_text() -> str:
    return UNIPROT_CLSTR


@pytest.fixture
def sample_clstr_stream(sample_clstr_text: str) -> io.StringIO:
    return io.StringIO(sample_clstr_text)


@pytest.fixture
def sample_clstr_file(temp_dir: Path, sample_clstr_text: str) -> Path:
    """Write the sample cluster report to disk."""
    clstr_file = temp_dir / "sample.clstr"
    clstr_file.write_text(sample_clstr_text)
    return clstr_file


@pytest.fixture
def sizes_clstr_file(temp_dir: Path) -> Path:
    """Create a report with clusters of sizes 1, 3, 2 and 3."""
    sizes = [1, 3, 2, 3]
    lines = []
    seq_number = 0
    for cluster_id, size in enumerate(sizes):
        lines.append(f">Cluster {cluster_id}")
        for index in range(size):
            seq_number += 1
            tail = "*" if index == 0 else "at 97.5%"
            lines.append(f"{index}\t{100 + seq_number}aa, >prot{seq_number}... {tail}")
    clstr_file = temp_dir / "sizes.clstr"
    clstr_file.write_text("\n".join(lines) + "\n")
    return clstr_file


@pytest.fixture
def sample_fasta_file(temp_dir: Path) -> Path:
    """Create the FASTA database the sample report was derived from."""
    sequences = [
        SeqRecord(
            Seq("MKLAVLVLLVVTASTPEAARKFLKDQVDLVGVYGTEGQSSTISNYGSGD"),
            id="seq1",
            description="Test protein 1"
        ),
        SeqRecord(
            Seq("MKLVFLVLLVVTASTPEAARKFLKDQVDLVGVYGTEGQSSTISNYGSGD"),
            id="seq2",
            description="Test protein 2"
        ),
        SeqRecord(
            Seq("MSTNPKPQRKTKRNTNRRPQDVKFPGG"),
            id="seq3",
            description="Capsid/core protein"
        ),
    ]

    fasta_file = temp_dir / "sample_proteins.fasta"
    with open(fasta_file, "w") as f:
        SeqIO.write(sequences, f, "fasta")

    return fasta_file


@pytest.fixture
def sample_cluster() -> Cluster:
    """Create a cluster programmatically."""
    return Cluster(
        id=3,
        members=(
            ClusterMember(index=0, length=250, sequence_id="rep", is_representative=True),
            ClusterMember(index=1, length=248, sequence_id="near", identity=Identity(primary=98.0)),
        ),
    )


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
    """Create test settings configuration."""
    return Settings(debug=True)


# Test markers for different test categories
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Disable progress bars and reset cached settings for each test."""
    monkeypatch.setenv("CLSTR_TOOLS__SHOW_PROGRESS", "false")
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()
