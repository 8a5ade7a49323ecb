class AirportLookupError(Exception):
    """Base class for errors raised inside the airport lookup service."""


class SearchStoreError(AirportLookupError):
    """The reference search store could not answer a candidate query."""


class CacheBackendError(AirportLookupError):
    """The key-value cache backend rejected or failed a command."""
