"""
Validation helpers layered on top of the cluster parser.

The base parser only checks each cluster on its own. The helpers here add
checks that span the whole stream, such as strictly increasing cluster ids.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from loguru import logger

from ..core.exceptions import ClusterOrderError
from ..core.types import Cluster
from .logging import performance_monitor


def validate_cluster_order(clusters: Iterable[Cluster]) -> Iterator[Cluster]:
    """
    Pass clusters through, checking that ids strictly increase.

    Args:
        clusters: Any iterable of clusters, typically a ``ClstrParser``

    Yields:
        The clusters unchanged

    Raises:
        ClusterOrderError: On the first repeated or decreasing id
    """
    previous_id: Optional[int] = None
    for cluster in clusters:
        if previous_id is not None and cluster.id <= previous_id:
            raise ClusterOrderError(
                f"Cluster id {cluster.id} does not follow cluster id {previous_id}",
                cluster_id=cluster.id,
                previous_id=previous_id,
            )
        previous_id = cluster.id
        yield cluster


@dataclass
class ValidationReport:
    """Outcome of validating a whole cluster report."""

    cluster_count: int = 0
    sequence_count: int = 0
    first_cluster_id: Optional[int] = None
    last_cluster_id: Optional[int] = None


@performance_monitor
def validate_clusters(clusters: Iterable[Cluster], check_order: bool = True) -> ValidationReport:
    """
    Consume a cluster stream, aborting at the first error.

    Raises:
        ParseError: Propagated from the parser or the order check
    """
    report = ValidationReport()
    stream = validate_cluster_order(clusters) if check_order else clusters
    for cluster in stream:
        if report.first_cluster_id is None:
            report.first_cluster_id = cluster.id
        report.last_cluster_id = cluster.id
        report.cluster_count += 1
        report.sequence_count += cluster.size

    logger.info(
        f"Validated {report.cluster_count} clusters with {report.sequence_count} sequences"
    )
    return report
