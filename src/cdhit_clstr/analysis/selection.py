"""
Cluster selection by size.

``top_n_clusters`` has to see every cluster before it can rank them, so it
holds the whole report in memory. ``filter_clusters_by_size`` stays lazy.
"""

import heapq
from typing import Iterable, Iterator, List

from loguru import logger

from ..core.types import Cluster
from ..utils.logging import performance_monitor


@performance_monitor
def top_n_clusters(clusters: Iterable[Cluster], n: int, renumber: bool = False) -> List[Cluster]:
    """
    Return the ``n`` largest clusters, largest first.

    Clusters of equal size keep their original order.

    Args:
        clusters: Cluster iterable
        n: Number of clusters to keep
        renumber: Give the selected clusters ids 0..n-1 in output order

    Returns:
        Selected clusters

    Raises:
        ValueError: If ``n`` is negative
    """
    if n < 0:
        raise ValueError(f"Cluster count must be non-negative: {n}")

    # nsmallest on (-size, position) keeps the selection stable for ties
    ranked = heapq.nsmallest(
        n,
        ((-cluster.size, position, cluster) for position, cluster in enumerate(clusters)),
        key=lambda item: (item[0], item[1]),
    )
    selected = [cluster for _, _, cluster in ranked]

    if renumber:
        selected = [cluster.renumbered(new_id) for new_id, cluster in enumerate(selected)]

    logger.debug(f"Selected {len(selected)} of the largest clusters (n={n})")
    return selected


def filter_clusters_by_size(clusters: Iterable[Cluster], min_size: int) -> Iterator[Cluster]:
    """Yield the clusters that have at least ``min_size`` members."""
    for cluster in clusters:
        if cluster.size >= min_size:
            yield cluster
