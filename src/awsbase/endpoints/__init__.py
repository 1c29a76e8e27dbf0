"""AWS partition metadata."""

from awsbase.endpoints.partition import (
    Partition,
    Region,
    default_partitions,
    partition_for_region,
    resolve_region,
)

__all__ = [
    "Partition",
    "Region",
    "default_partitions",
    "partition_for_region",
    "resolve_region",
]
