"""Localhost dashboard — see, start and stop local dev services by port."""

from localdash.config import Config
from localdash.dashboard import Dashboard

__all__ = ["Config", "Dashboard"]
