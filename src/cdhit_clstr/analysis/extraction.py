"""
Extraction of cluster sequences from a FASTA sequence database.

Cluster reports only carry sequence identifiers. These helpers look the
identifiers up in the FASTA file the clustering was run on and write the
matching records with Biopython.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Mapping, Optional, Set

from Bio import SeqIO
from Bio.SeqRecord import SeqRecord
from loguru import logger

from ..core.exceptions import FileSystemError, SequenceNotFoundError
from ..core.types import Cluster, PathLike
from ..utils.file_operations import derive_output_path, ensure_directory, safe_open


def _invalid_database(path: Path, error: ValueError) -> FileSystemError:
    # Biopython raises ValueError for duplicate record ids
    return FileSystemError(
        f"Cannot index sequence database {path}: {error}",
        file_path=str(path),
        operation="index",
    )


@contextmanager
def open_sequence_database(file_path: PathLike) -> Iterator[Mapping[str, SeqRecord]]:
    """
    Open a FASTA file as a mapping from record id to ``SeqRecord``.

    Plain files are indexed on disk with ``SeqIO.index``; gzip-compressed
    files are read into memory.

    Raises:
        FileSystemError: If the database cannot be read or repeats a record id
    """
    path = Path(file_path)

    if path.suffix == ".gz":
        with safe_open(path) as handle:
            try:
                database = SeqIO.to_dict(SeqIO.parse(handle, "fasta"))
            except ValueError as e:
                raise _invalid_database(path, e) from e
        logger.info(f"Loaded {len(database)} sequences from {path}")
        yield database
        return

    try:
        database = SeqIO.index(str(path), "fasta")
    except OSError as e:
        raise FileSystemError(
            f"OS error accessing file: {path} - {e}",
            file_path=str(path),
            operation="index"
        ) from e
    except ValueError as e:
        raise _invalid_database(path, e) from e

    try:
        logger.info(f"Indexed {len(database)} sequences from {path}")
        yield database
    finally:
        database.close()


def _description_text(record: SeqRecord) -> str:
    """Return the header text after the record id."""
    description = record.description or ""
    if description.startswith(record.id):
        description = description[len(record.id):]
    return description.strip()


def cluster_records(
    cluster: Cluster,
    database: Mapping[str, SeqRecord],
    strict: bool = False,
) -> List[SeqRecord]:
    """
    Look up the records of every member of a cluster.

    Args:
        cluster: Cluster whose members to look up
        database: Mapping from sequence id to record
        strict: Raise instead of warning when a member is missing

    Returns:
        Records in member order

    Raises:
        SequenceNotFoundError: If ``strict`` and a member is missing
    """
    records = []
    for member in cluster.members:
        record = database.get(member.sequence_id)
        if record is None:
            if strict:
                raise SequenceNotFoundError(
                    f"Sequence {member.sequence_id} of cluster {cluster.id} not found in database",
                    sequence_id=member.sequence_id,
                )
            logger.warning(f"Sequence ID {member.sequence_id} not found in FASTA")
            continue
        records.append(record)
    return records


def cluster_file_stem(cluster: Cluster, database: Mapping[str, SeqRecord]) -> str:
    """
    Name a cluster after the description of its representative sequence.

    Spaces and slashes become underscores. A representative missing from the
    database gives ``no-description``; one without a description falls back
    to its id.
    """
    representative = cluster.representative
    if representative is None:
        return "No_representative"

    record = database.get(representative.sequence_id)
    if record is None:
        name = "no-description"
    else:
        name = _description_text(record) or representative.sequence_id

    return name.replace(" ", "_").replace("/", "_")


def write_cluster_fastas(
    clusters: Iterable[Cluster],
    database: Mapping[str, SeqRecord],
    clstr_path: PathLike,
    output_dir: Optional[PathLike] = None,
    strict: bool = False,
) -> List[Path]:
    """
    Write one FASTA file per cluster.

    Files are named ``<clstr stem>.<representative description>.fasta``
    and placed next to the cluster file unless ``output_dir`` is given.
    When two clusters would share a name, the cluster id is appended.

    Returns:
        Paths of the files written
    """
    written: List[Path] = []
    used_names: Set[str] = set()
    target_dir = ensure_directory(output_dir) if output_dir is not None else None

    for cluster in clusters:
        stem = cluster_file_stem(cluster, database)
        if stem in used_names:
            logger.warning(f"Duplicate output name {stem!r}, appending cluster id {cluster.id}")
            stem = f"{stem}_{cluster.id}"
        used_names.add(stem)

        out_path = derive_output_path(clstr_path, f"{stem}.fasta")
        if target_dir is not None:
            out_path = target_dir / out_path.name

        records = cluster_records(cluster, database, strict=strict)
        with safe_open(out_path, "w") as handle:
            SeqIO.write(records, handle, "fasta")
        written.append(out_path)

    logger.info(f"Wrote {len(written)} cluster FASTA files")
    return written


def representative_records(
    clusters: Iterable[Cluster],
    database: Mapping[str, SeqRecord],
    strict: bool = False,
) -> Iterator[SeqRecord]:
    """
    Yield the representative record of every cluster.

    The record description is extended with ``cluster=<id> size=<members>``.
    """
    for cluster in clusters:
        representative = cluster.representative
        record = database.get(representative.sequence_id) if representative else None
        if record is None:
            if strict:
                raise SequenceNotFoundError(
                    f"Representative of cluster {cluster.id} not found in database",
                    sequence_id=representative.sequence_id if representative else None,
                )
            logger.warning(f"Representative of cluster {cluster.id} not found in FASTA")
            continue

        description = _description_text(record)
        annotation = f"cluster={cluster.id} size={cluster.size}"
        yield SeqRecord(
            record.seq,
            id=record.id,
            name=record.name,
            description=f"{description} {annotation}" if description else annotation,
        )


def write_representatives(
    clusters: Iterable[Cluster],
    database: Mapping[str, SeqRecord],
    output_path: PathLike,
    strict: bool = False,
) -> int:
    """Write representative sequences to one FASTA file and return the count."""
    with safe_open(output_path, "w") as handle:
        count = SeqIO.write(representative_records(clusters, database, strict=strict), handle, "fasta")
    logger.info(f"Wrote {count} representative sequences to {output_path}")
    return count
