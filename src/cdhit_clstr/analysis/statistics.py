"""Summary statistics over a stream of clusters."""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from ..core.types import Cluster


@dataclass
class ClusterStatistics:
    """Counts gathered in a single pass over a cluster report."""

    cluster_count: int = 0
    sequence_count: int = 0
    singleton_count: int = 0
    largest_cluster_id: Optional[int] = None
    largest_cluster_size: int = 0

    @property
    def mean_cluster_size(self) -> float:
        """Return the average number of sequences per cluster."""
        if self.cluster_count == 0:
            return 0.0
        return self.sequence_count / self.cluster_count

    def add(self, cluster: Cluster) -> None:
        """Account for one more cluster."""
        self.cluster_count += 1
        self.sequence_count += cluster.size
        if cluster.size == 1:
            self.singleton_count += 1
        if cluster.size > self.largest_cluster_size:
            self.largest_cluster_size = cluster.size
            self.largest_cluster_id = cluster.id

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["mean_cluster_size"] = self.mean_cluster_size
        return result

    def to_tsv(self) -> str:
        """Render the two-line table printed by ``cdhit-clstr stats``."""
        return (
            "Cluster count\tSequence count\tAvg seqs per cluster\n"
            f"{self.cluster_count}\t{self.sequence_count}\t{self.mean_cluster_size}\n"
        )


def summarize_clusters(clusters: Iterable[Cluster]) -> ClusterStatistics:
    """
    Count clusters and sequences without keeping clusters in memory.

    Args:
        clusters: Cluster iterable, typically a ``ClstrParser``

    Returns:
        ClusterStatistics for the whole stream
    """
    stats = ClusterStatistics()
    for cluster in clusters:
        stats.add(cluster)
    return stats


def cluster_size_table(clusters: Iterable[Cluster]) -> Iterator[Tuple[int, int]]:
    """Yield ``(cluster id, member count)`` for every cluster."""
    for cluster in clusters:
        yield cluster.id, cluster.size
