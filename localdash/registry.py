"""Service Registry — the JSON file of configured services.

Config format:
    {
        "services": [
            {
                "name": "api",
                "port": 4000,
                "path": "~/proj/api",
                "startCmd": "npm run dev",
                "type": "backend",
                "github": "https://github.com/me/api"
            }
        ]
    }

The file is re-read on every call.  Mutations hold an exclusive lock on a
sibling ``.lock`` file for the whole read-modify-write and land via an
atomic rename, so concurrent writers never lose each other's updates.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from .errors import ConfigIOFailure
from .models import ServiceDescriptor

log = logging.getLogger(__name__)


class ServiceRegistry:
    def __init__(self, config_path: str | Path) -> None:
        self.path = Path(config_path)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def load_all(self) -> list[ServiceDescriptor]:
        """Return every configured service in file order."""
        document = self._read_document()
        try:
            return [ServiceDescriptor.from_dict(entry) for entry in document["services"]]
        except ValueError as exc:
            raise ConfigIOFailure(f"Invalid service entry in {self.path}: {exc}") from exc

    def find_by_port(self, port: int) -> ServiceDescriptor | None:
        """Return the first service configured for `port`, or None.

        Duplicate ports are a configuration mistake; the earliest entry wins.
        """
        for descriptor in self.load_all():
            if descriptor.port == port:
                return descriptor
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def append(self, descriptor: ServiceDescriptor) -> None:
        with self._locked():
            document = self._read_document()
            if any(entry.get("port") == descriptor.port for entry in document["services"]):
                log.warning(
                    "Port %d is already configured — '%s' will be shadowed by the earlier entry",
                    descriptor.port, descriptor.name,
                )
            document["services"].append(descriptor.to_dict())
            self._write_document(document)
        log.info("Added service '%s' on port %d", descriptor.name, descriptor.port)

    def remove_by_port(self, port: int) -> int:
        """Remove every service on `port`.  Returns how many were removed."""
        with self._locked():
            document = self._read_document()
            before = len(document["services"])
            document["services"] = [
                entry for entry in document["services"] if entry.get("port") != port
            ]
            removed = before - len(document["services"])
            if removed:
                self._write_document(document)
        if removed:
            log.info("Removed %d service(s) on port %d", removed, port)
        return removed

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_document(self) -> dict[str, Any]:
        if not self.path.exists():
            log.warning("No services config at %s — treating as empty", self.path)
            return {"services": []}
        try:
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigIOFailure(f"Cannot read {self.path}: {exc}") from exc

        if not isinstance(document, dict):
            raise ConfigIOFailure(f"{self.path} must contain a JSON object")
        services = document.setdefault("services", [])
        if not isinstance(services, list):
            raise ConfigIOFailure(f"'services' in {self.path} must be a list")
        for index, entry in enumerate(services):
            if not isinstance(entry, dict):
                raise ConfigIOFailure(f"Service #{index} in {self.path} is not a JSON object")
        return document

    def _write_document(self, document: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2)
                    f.write("\n")
                os.replace(tmp_name, self.path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise ConfigIOFailure(f"Cannot write {self.path}: {exc}") from exc

    @contextmanager
    def _locked(self) -> Iterator[None]:
        lock_path = self.path.with_name(self.path.name + ".lock")
        try:
            lock_path.parent.mkdir(parents=True, exist_ok=True)
            lock_file = open(lock_path, "a")
        except OSError as exc:
            raise ConfigIOFailure(f"Cannot lock {self.path}: {exc}") from exc
        with lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file, fcntl.LOCK_UN)
