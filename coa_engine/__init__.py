"""Chart-of-accounts tree engine for a multi-tenant accounting API."""

from coa_engine.client import CoaClient
from coa_engine.config import ApiConfig, EngineConfig
from coa_engine.engine import CoaTreeEngine, EmptyState, MutationResult
from coa_engine.exceptions import (
    ApiError,
    CoaEngineError,
    ConfigurationError,
    ConflictError,
    InvalidAccountStateError,
    InvalidTreeError,
    NetworkError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from coa_engine.forms import AccountFormSession
from coa_engine.models import AccountFields, AccountNode, AccountType, NormalBalance
from coa_engine.notifications import LoggingNotifier, RecordingNotifier
from coa_engine.tree import filter_tree, flatten_tree

__version__ = "0.1.0"

__all__ = [
    "AccountFields",
    "AccountFormSession",
    "AccountNode",
    "AccountType",
    "ApiConfig",
    "ApiError",
    "CoaClient",
    "CoaEngineError",
    "CoaTreeEngine",
    "ConfigurationError",
    "ConflictError",
    "EmptyState",
    "EngineConfig",
    "InvalidAccountStateError",
    "InvalidTreeError",
    "LoggingNotifier",
    "MutationResult",
    "NetworkError",
    "NormalBalance",
    "NotFoundError",
    "RecordingNotifier",
    "ServerError",
    "ValidationError",
    "filter_tree",
    "flatten_tree",
]
