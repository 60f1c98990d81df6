"""Client-side controller for the tagger HTTP API.

Contains:
- tapper: BPM tap estimator
- api: HTTP client for the backend routes
- state: selection, tag form, search filter and the flows that drive the API
"""

from .tapper import BpmTapper
from .api import ApiError, TaggerApiClient
from .state import ClientState, TagForm

__all__ = ["BpmTapper", "ApiError", "TaggerApiClient", "ClientState", "TagForm"]
