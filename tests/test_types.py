"""Tests for the cluster data model and its invariants."""

import dataclasses

import pytest

from cdhit_clstr.core.exceptions import (
    ClusterOrderError,
    InvalidClusterError,
    MultipleRepresentativesError,
    NoRepresentativeError,
)
from cdhit_clstr.core.types import Cluster, ClusterMember, Identity
from cdhit_clstr.utils.validation import validate_cluster_order, validate_clusters


pytestmark = pytest.mark.unit


def make_cluster(cluster_id, size=1):
    members = [ClusterMember(index=0, length=10, sequence_id=f"c{cluster_id}_0", is_representative=True)]
    members.extend(
        ClusterMember(index=i, length=10, sequence_id=f"c{cluster_id}_{i}", identity=Identity(primary=90.0))
        for i in range(1, size)
    )
    return Cluster(id=cluster_id, members=members)


class TestIdentity:
    def test_requires_one_side(self):
        with pytest.raises(ValueError):
            Identity()

    def test_rejects_negative(self):
        with pytest.raises(ValueError):
            Identity(primary=-1.0)

    def test_reciprocal_requires_primary_only(self):
        with pytest.raises(ValueError):
            Identity(secondary=99.0, reciprocal=True)
        with pytest.raises(ValueError):
            Identity(primary=99.0, secondary=98.0, reciprocal=True)

    def test_precision_does_not_affect_equality(self):
        assert Identity(primary=99.0, precision=(2, None)) == Identity(primary=99.0)

    @pytest.mark.parametrize(
        "identity, text",
        [
            (Identity(primary=99.7), "99.7%"),
            (Identity(primary=100.0, precision=(0, None)), "100%"),
            (Identity(primary=80.0, secondary=70.5), "80.0%/70.5%"),
            (Identity(secondary=100.0, precision=(None, 2)), "-/100.00%"),
            (Identity(primary=99.9, reciprocal=True), "99.9%/-"),
        ],
    )
    def test_format(self, identity, text):
        assert identity.format() == text


class TestCluster:
    def test_members_become_a_tuple(self):
        cluster = make_cluster(0, size=3)

        assert isinstance(cluster.members, tuple)
        assert len(cluster) == 3
        assert [member.index for member in cluster] == [0, 1, 2]

    def test_is_immutable(self, sample_cluster):
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample_cluster.id = 4

    def test_representative(self, sample_cluster):
        assert sample_cluster.representative.sequence_id == "rep"
        assert sample_cluster.representative_count == 1
        assert sample_cluster.sequence_ids == ("rep", "near")

    def test_renumbered(self, sample_cluster):
        renumbered = sample_cluster.renumbered(0)

        assert renumbered.id == 0
        assert renumbered.members == sample_cluster.members
        assert sample_cluster.id == 3

    def test_validate_accepts_valid_cluster(self, sample_cluster):
        sample_cluster.validate()

    def test_validate_no_representative(self):
        with pytest.raises(NoRepresentativeError):
            Cluster(id=1).validate()

    def test_validate_multiple_representatives(self):
        members = [
            ClusterMember(index=0, length=1, sequence_id="a", is_representative=True),
            ClusterMember(index=1, length=1, sequence_id="b", is_representative=True),
        ]
        with pytest.raises(MultipleRepresentativesError):
            Cluster(id=1, members=members).validate()

    def test_validate_missing_identity(self):
        members = [
            ClusterMember(index=0, length=1, sequence_id="a", is_representative=True),
            ClusterMember(index=1, length=1, sequence_id="b"),
        ]
        with pytest.raises(InvalidClusterError):
            Cluster(id=1, members=members).validate()


class TestClusterOrder:
    def test_increasing_ids_pass(self):
        clusters = [make_cluster(0), make_cluster(2), make_cluster(5)]

        assert list(validate_cluster_order(clusters)) == clusters

    @pytest.mark.parametrize("ids", [[0, 1, 1], [0, 2, 1]])
    def test_repeated_or_decreasing_ids(self, ids):
        checked = validate_cluster_order(make_cluster(i) for i in ids)

        assert next(checked).id == ids[0]
        assert next(checked).id == ids[1]
        with pytest.raises(ClusterOrderError) as exc_info:
            next(checked)
        assert exc_info.value.cluster_id == ids[2]
        assert exc_info.value.previous_id == ids[1]

    def test_validate_clusters_report(self):
        report = validate_clusters([make_cluster(3, size=2), make_cluster(4, size=3)])

        assert report.cluster_count == 2
        assert report.sequence_count == 5
        assert report.first_cluster_id == 3
        assert report.last_cluster_id == 4

    def test_validate_clusters_without_order_check(self):
        report = validate_clusters([make_cluster(3), make_cluster(1)], check_order=False)

        assert report.cluster_count == 2
