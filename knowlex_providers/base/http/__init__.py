"""HTTP plumbing shared by provider adapters."""

from .client import close_all_clients, get_httpx_client
from .transport import read_json, send_request

__all__ = ["get_httpx_client", "close_all_clients", "send_request", "read_json"]
