"""Aptos full node client components."""

from .builder import TransactionBuilder
from .chain import ChainIdCache
from .client import NodeClient
from .config import NodeClientConfig
from .defaults import GasDefaults
from .events import EventFetcher
from .poller import ConfirmationPoller
from .submission import SubmissionPipeline
from .transport import NodeTransport
from .view import ViewInvoker

__all__ = [
    "ChainIdCache",
    "ConfirmationPoller",
    "EventFetcher",
    "GasDefaults",
    "NodeClient",
    "NodeClientConfig",
    "NodeTransport",
    "SubmissionPipeline",
    "TransactionBuilder",
    "ViewInvoker",
]
