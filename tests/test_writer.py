"""
Tests for the .clstr writer.

Tests focus on:
- Canonical serialization of every identity notation
- Precision handling
- Rejection of invalid clusters and sink failures
- Round trips through the parser
"""

import gzip
import io

import pytest

from cdhit_clstr.core.exceptions import ClstrWriteIOError, InvalidClusterError, WriteError
from cdhit_clstr.core.parser import ClstrParser, from_stream, read_clusters
from cdhit_clstr.core.types import Cluster, ClusterMember, Identity, SequenceUnit
from cdhit_clstr.core.writer import ClstrWriter, format_member_line, to_stream, write_clusters


pytestmark = pytest.mark.unit


class FailingStream(io.StringIO):
    """Text stream whose writes fail like a full disk."""

    def write(self, text):
        raise OSError(28, "No space left on device")


def member(index, seq_id, identity=None, representative=False, length=100):
    return ClusterMember(
        index=index,
        length=length,
        sequence_id=seq_id,
        is_representative=representative,
        identity=identity,
    )


def test_write_programmatic_cluster(sample_cluster):
    stream = io.StringIO()
    writer = ClstrWriter(stream)

    writer.write_cluster(sample_cluster)

    assert stream.getvalue() == (
        ">Cluster 3\n"
        "0\t250aa, >rep... *\n"
        "1\t248aa, >near... at 98.0%\n"
    )
    assert writer.clusters_written == 1


@pytest.mark.parametrize(
    "identity, expected",
    [
        (Identity(primary=99.9), " at 99.9%"),
        (Identity(primary=99.9, secondary=100.0), " at 99.9%/100.0%"),
        (Identity(secondary=100.0), " at -/100.0%"),
        (Identity(primary=99.9, reciprocal=True), " at 99.9%/-"),
    ],
)
def test_identity_serialization(identity, expected):
    line = format_member_line(member(1, "seq2", identity=identity, length=300))

    assert line == f"1\t300aa, >seq2...{expected}"


def test_stored_precision_wins_over_default():
    identity = Identity(primary=99.7, secondary=100.0, precision=(2, 0))

    line = format_member_line(member(1, "s", identity=identity), default_precision=3)

    assert line.endswith(" at 99.70%/100%")


def test_default_precision():
    line = format_member_line(member(1, "s", identity=Identity(primary=87.25)), default_precision=2)

    assert line.endswith(" at 87.25%")


def test_nucleotide_unit():
    nt_member = ClusterMember(
        index=0, length=1200, sequence_id="contig", is_representative=True, unit=SequenceUnit.NUCLEOTIDE
    )

    assert format_member_line(nt_member) == "0\t1200nt, >contig... *"


def test_end_to_end_round_trip(sample_clstr_text):
    clusters = read_clusters(io.StringIO(sample_clstr_text))
    stream = io.StringIO()

    ClstrWriter(stream).write_clusters(clusters)

    assert stream.getvalue() == sample_clstr_text


@pytest.mark.parametrize("fixture_name", ["sample_clstr_text", "two_d_clstr_text"])
def test_round_trip_is_identical(request, fixture_name):
    text = request.getfixturevalue(fixture_name)
    clusters = read_clusters(io.StringIO(text))

    stream = io.StringIO()
    ClstrWriter(stream).write_clusters(clusters)
    reparsed = read_clusters(io.StringIO(stream.getvalue()))

    assert reparsed == clusters
    assert stream.getvalue() == text


def test_round_trip_normalizes_whitespace(uniprot_clstr_text):
    """Space-separated input is written back with tabs."""
    text = uniprot_clstr_text.split(">Cluster 1")[0]
    clusters = read_clusters(io.StringIO(text))

    stream = io.StringIO()
    ClstrWriter(stream).write_clusters(clusters)

    assert stream.getvalue().splitlines()[1] == "0\t4481aa, >sp|P0C6T5|R1A_BCHK5... at 99.89%"
    assert read_clusters(io.StringIO(stream.getvalue())) == clusters


@pytest.mark.parametrize(
    "members",
    [
        (member(0, "a", identity=Identity(primary=90.0)),),
        (member(0, "a", representative=True), member(1, "b", representative=True)),
        (),
    ],
)
def test_rejects_wrong_representative_count(members):
    stream = io.StringIO()
    writer = ClstrWriter(stream)

    with pytest.raises(InvalidClusterError) as exc_info:
        writer.write_cluster(Cluster(id=5, members=members))

    assert exc_info.value.cluster_id == 5
    assert stream.getvalue() == ""
    assert writer.clusters_written == 0


@pytest.mark.parametrize(
    "members",
    [
        # non-representative without identity
        (member(0, "a", representative=True), member(1, "b")),
        # representative with identity
        (
            member(0, "a", identity=Identity(primary=90.0)),
            member(1, "b", representative=True, identity=Identity(primary=90.0)),
        ),
    ],
)
def test_rejects_inconsistent_identity(members):
    cluster = Cluster(id=0, members=members)
    stream = io.StringIO()

    with pytest.raises(InvalidClusterError):
        ClstrWriter(stream).write_cluster(cluster)
    assert stream.getvalue() == ""


@pytest.mark.parametrize(
    "bad_member",
    [
        ClusterMember(index=-1, length=10, sequence_id="a", is_representative=True),
        ClusterMember(index=0, length=-10, sequence_id="a", is_representative=True),
        ClusterMember(index=0, length=10, sequence_id="", is_representative=True),
        ClusterMember(index=0, length=10, sequence_id="a\nb", is_representative=True),
        ClusterMember(index=0, length=10, sequence_id="a\rb", is_representative=True),
    ],
)
def test_rejects_unwritable_member(bad_member):
    stream = io.StringIO()

    with pytest.raises(InvalidClusterError) as exc_info:
        ClstrWriter(stream).write_cluster(Cluster(id=0, members=(bad_member,)))

    assert exc_info.value.cluster_id == 0
    assert stream.getvalue() == ""


def test_io_error_is_wrapped(sample_cluster):
    writer = ClstrWriter(FailingStream())

    with pytest.raises(ClstrWriteIOError) as exc_info:
        writer.write_cluster(sample_cluster)

    assert isinstance(exc_info.value, WriteError)
    assert isinstance(exc_info.value.__cause__, OSError)


def test_close_does_not_close_foreign_stream(sample_cluster):
    stream = io.StringIO()

    with ClstrWriter(stream) as writer:
        writer.write_cluster(sample_cluster)

    assert not stream.closed


def test_to_path_and_gzip(temp_dir, sample_clstr_text):
    clusters = read_clusters(io.StringIO(sample_clstr_text))
    plain = temp_dir / "out" / "clusters.clstr"
    compressed = temp_dir / "clusters.clstr.gz"

    assert write_clusters(clusters, plain) == 2
    with ClstrWriter.to_path(compressed) as writer:
        writer.write_clusters(clusters)

    assert plain.read_text() == sample_clstr_text
    with gzip.open(compressed, "rt") as handle:
        assert handle.read() == sample_clstr_text
    with ClstrParser.from_path(compressed) as parser:
        assert list(parser) == clusters


def test_stream_aliases(sample_clstr_text):
    stream = io.StringIO()
    with to_stream(stream, default_precision=2) as clstr_writer:
        clstr_writer.write_clusters(from_stream(io.StringIO(sample_clstr_text)))

    assert stream.getvalue() == sample_clstr_text
