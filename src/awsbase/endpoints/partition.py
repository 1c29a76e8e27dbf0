"""AWS partitions and region-to-partition resolution.

See https://docs.aws.amazon.com/whitepapers/latest/aws-fault-isolation-boundaries/partitions.html.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from awsbase.endpoints._data import PARTITIONS


@dataclass(frozen=True)
class Region:
    id: str
    description: str


@dataclass(frozen=True)
class Partition:
    """An isolated set of regions sharing a DNS suffix."""

    id: str
    name: str
    dns_suffix: str
    region_regex: re.Pattern[str]

    def regions(self) -> dict[str, Region]:
        """Return the partition's regions indexed by ID; the dict is a copy."""
        entry = _PARTITIONS_AND_REGIONS.get(self.id)
        if entry is None:
            return {}
        return dict(entry.regions)

    def matches(self, region_id: str) -> bool:
        entry = _PARTITIONS_AND_REGIONS.get(self.id)
        if entry is not None and region_id in entry.regions:
            return True
        return self.region_regex.fullmatch(region_id) is not None


@dataclass(frozen=True)
class _PartitionAndRegions:
    partition: Partition
    regions: Mapping[str, Region]


def _build_table() -> dict[str, _PartitionAndRegions]:
    table: dict[str, _PartitionAndRegions] = {}
    for raw in PARTITIONS:
        partition = Partition(
            id=str(raw["id"]),
            name=str(raw["name"]),
            dns_suffix=str(raw["dns_suffix"]),
            region_regex=re.compile(str(raw["region_regex"])),
        )
        regions = {
            region_id: Region(id=region_id, description=description)
            for region_id, description in dict(raw["regions"]).items()  # type: ignore[arg-type]
        }
        table[partition.id] = _PartitionAndRegions(
            partition=partition,
            regions=MappingProxyType(regions),
        )
    return table


_PARTITIONS_AND_REGIONS = _build_table()


def default_partitions() -> list[Partition]:
    """Return the known partitions in table order."""
    return [entry.partition for entry in _PARTITIONS_AND_REGIONS.values()]


def partition_for_region(partitions: list[Partition], region_id: str) -> Partition | None:
    """Return the first partition in ``partitions`` that includes ``region_id``.

    A region is included when it is a known region of the partition or when it
    matches the partition's region regex. Returns None for unknown regions.
    """
    for partition in partitions:
        if partition.id not in _PARTITIONS_AND_REGIONS:
            continue
        if partition.matches(region_id):
            return partition
    return None


def resolve_region(region_id: str) -> Partition | None:
    return partition_for_region(default_partitions(), region_id)
