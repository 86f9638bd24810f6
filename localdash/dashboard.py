from __future__ import annotations

from dataclasses import dataclass

from .config import Config
from .lifecycle import LifecycleController
from .prober import PortProber
from .registry import ServiceRegistry
from .status import StatusAggregator


@dataclass
class Dashboard:
    """The core components both front ends talk to."""

    config: Config
    registry: ServiceRegistry
    prober: PortProber
    lifecycle: LifecycleController
    status: StatusAggregator

    @classmethod
    def from_config(cls, config: Config) -> Dashboard:
        registry = ServiceRegistry(config.services_path)
        prober = PortProber(timeout=config.probe_timeout)
        return cls(
            config=config,
            registry=registry,
            prober=prober,
            lifecycle=LifecycleController(
                registry,
                prober,
                settle_delay=config.settle_delay,
                stop_confirm_delay=config.stop_confirm_delay,
            ),
            status=StatusAggregator(registry, prober),
        )
