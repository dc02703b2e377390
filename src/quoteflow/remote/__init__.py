"""Remote record store clients."""

from quoteflow.remote.client import SubmitClient, create_client
from quoteflow.remote.http import HttpClient
from quoteflow.remote.mock import MockClient
from quoteflow.remote.types import SubmitError, SubmitReceipt

__all__ = [
    "HttpClient",
    "MockClient",
    "SubmitClient",
    "SubmitError",
    "SubmitReceipt",
    "create_client",
]
