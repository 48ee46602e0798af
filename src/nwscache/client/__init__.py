"""HTTP client for nwscache.

:class:`SyncClient` is a blocking client backed by :class:`httpx.Client`
that sends the required ``User-Agent`` header and returns a
:class:`~nwscache.models.FetchedResponse` (body plus ``Expires`` header).

Example::

    from nwscache.client import SyncClient

    with SyncClient(config.request) as client:
        resp = client.fetch("https://api.weather.gov/points/39.7456,-97.0892")
"""

from nwscache.client.sync_client import SyncClient

__all__ = ["SyncClient"]
