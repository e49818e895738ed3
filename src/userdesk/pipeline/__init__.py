"""
User list filtering pipeline: remote role/age query followed by local name/company filtering.
"""

from .cancellation import CancellationToken
from .controller import FilterSnapshot, PipelineState, UserFilterController, create_filter_controller
from .local_filter import filter_users
from .remote_query import MalformedPayloadError, RemoteQueryStage

__all__ = [
    "CancellationToken",
    "FilterSnapshot",
    "PipelineState",
    "UserFilterController",
    "create_filter_controller",
    "filter_users",
    "MalformedPayloadError",
    "RemoteQueryStage",
]
