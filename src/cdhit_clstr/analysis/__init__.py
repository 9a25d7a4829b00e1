"""Cluster statistics, selection and sequence extraction."""

from .statistics import ClusterStatistics, summarize_clusters, cluster_size_table
from .selection import top_n_clusters, filter_clusters_by_size
from .extraction import (
    open_sequence_database,
    cluster_records,
    cluster_file_stem,
    write_cluster_fastas,
    representative_records,
    write_representatives,
)

__all__ = [
    "ClusterStatistics",
    "summarize_clusters",
    "cluster_size_table",
    "top_n_clusters",
    "filter_clusters_by_size",
    "open_sequence_database",
    "cluster_records",
    "cluster_file_stem",
    "write_cluster_fastas",
    "representative_records",
    "write_representatives",
]
