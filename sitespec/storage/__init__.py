"""Adapter persistence and in-flight de-duplication."""

from sitespec.storage.inflight import InFlightRegistry, host_key
from sitespec.storage.persistence import AdapterStore, utc_now

__all__ = ['AdapterStore', 'InFlightRegistry', 'host_key', 'utc_now']
