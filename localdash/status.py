"""Status Aggregator — joins configured services with fresh port probes."""

from __future__ import annotations

import asyncio

from .models import KNOWN_TYPES, QuickStatus, ServiceDescriptor, ServiceView
from .prober import PortProber
from .registry import ServiceRegistry


class StatusAggregator:
    def __init__(self, registry: ServiceRegistry, prober: PortProber) -> None:
        self.registry = registry
        self.prober = prober

    async def get_all(self, filter: str | None = "all") -> list[ServiceView]:
        """Snapshot every configured service, optionally narrowed by `filter`.

        `filter` is ``all``, ``running``, ``stopped`` or a type tag.  Unknown
        values fall back to ``all``.  Results keep config file order.
        """
        descriptors = self.registry.load_all()
        views = await self._probe_all(descriptors)

        if filter == "running":
            return [v for v in views if v.running]
        if filter == "stopped":
            return [v for v in views if not v.running]
        if filter and self._is_type_tag(filter, descriptors):
            return [v for v in views if v.descriptor.type == filter]
        return views

    async def get_one(self, port: int) -> ServiceView | None:
        descriptor = self.registry.find_by_port(port)
        if descriptor is None:
            return None
        return ServiceView(descriptor, await self.prober.probe(port))

    async def quick_status(self) -> QuickStatus:
        views = await self.get_all()
        return QuickStatus(
            running=[v for v in views if v.running],
            stopped=[v for v in views if not v.running],
        )

    async def _probe_all(self, descriptors: list[ServiceDescriptor]) -> list[ServiceView]:
        statuses = await asyncio.gather(
            *(self.prober.probe(d.port) for d in descriptors)
        )
        return [ServiceView(d, s) for d, s in zip(descriptors, statuses)]

    @staticmethod
    def _is_type_tag(value: str, descriptors: list[ServiceDescriptor]) -> bool:
        return value in KNOWN_TYPES or any(d.type == value for d in descriptors)
