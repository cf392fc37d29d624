"""Guild Wars 2 API adapters."""

from gw2_presence.adapters.gw2_api.gw2_api_client import Gw2ApiClient

__all__ = ["Gw2ApiClient"]
