"""
Filter pipeline orchestration for the user list.

Coordinates the flow: filter parameters → remote query (role/age) →
local filter (name/company) → displayed users, with an error/status
channel alongside.
"""

import asyncio
from collections.abc import Callable
from enum import Enum
from functools import partial
from typing import Any

from pydantic import BaseModel

from userdesk.core.models import FilterParameters, QueryError, QueryResult, UserRecord
from userdesk.observability.logger import get_logger
from userdesk.observability.metrics import MetricsCollector
from userdesk.settings import Settings
from userdesk.sources.base import UserDataSource

from .cancellation import CancellationToken
from .local_filter import filter_users
from .remote_query import RemoteQueryStage

logger = get_logger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    QUERYING = "querying"
    READY = "ready"


class FilterSnapshot(BaseModel):
    """
    What the caller renders at one point in time.

    Attributes:
        state: Pipeline state
        parameters: Parameters the snapshot was computed for
        users: Displayed users (remote result after local filtering)
        error: Error of the last remote query, if it failed
        status_message: Latest message for the status sink
    """

    state: PipelineState
    parameters: FilterParameters
    users: tuple[UserRecord, ...] = ()
    error: QueryError | None = None
    status_message: str | None = None

    class Config:
        frozen = True


class UserFilterController:
    """
    Owns the filter pipeline state.

    States:
    - IDLE: neither role nor age set, nothing displayed
    - QUERYING: a remote query for the current role/age is in flight
    - READY: the query for the current role/age resolved (successfully or not)

    Every role/age change cancels the previous query's token and issues a new
    query, so only the result for the latest role/age is ever displayed.
    Name/company changes are applied locally without re-querying.

    All methods must be called from the event loop thread.
    """

    def __init__(self, remote_stage: RemoteQueryStage, eager_abort: bool = False):
        """
        Initialize the controller.

        Args:
            remote_stage: Stage used for role/age queries
            eager_abort: Also cancel the task of a superseded query
        """
        self.remote_stage = remote_stage
        self.eager_abort = eager_abort

        self._parameters = FilterParameters()
        self._state = PipelineState.IDLE
        self._server_users: tuple[UserRecord, ...] = ()
        self._users: tuple[UserRecord, ...] = ()
        self._error: QueryError | None = None
        self._status_message: str | None = None

        self._token: CancellationToken | None = None
        self._task: asyncio.Task | None = None
        self._subscribers: list[Callable[[FilterSnapshot], Any]] = []
        self._closed = False

    # -- read side ---------------------------------------------------------

    @property
    def parameters(self) -> FilterParameters:
        return self._parameters

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def users(self) -> tuple[UserRecord, ...]:
        return self._users

    @property
    def error(self) -> QueryError | None:
        return self._error

    @property
    def status_message(self) -> str | None:
        return self._status_message

    def snapshot(self) -> FilterSnapshot:
        return FilterSnapshot(
            state=self._state,
            parameters=self._parameters,
            users=self._users,
            error=self._error,
            status_message=self._status_message,
        )

    def subscribe(self, callback: Callable[[FilterSnapshot], Any]) -> Callable[[], None]:
        """
        Register a callback invoked with a new snapshot after every change.

        Returns:
            Function that removes the callback
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # -- write side --------------------------------------------------------

    def update(self, **changes: Any) -> FilterSnapshot:
        """
        Change some filter parameters, keeping the others.

        Example:
            controller.update(role="editor", age=25)
            controller.update(name="jo")

        Raises:
            pydantic.ValidationError: If the resulting parameters are invalid
            RuntimeError: If the controller is closed
        """
        merged = {**self._parameters.model_dump(), **changes}
        return self.set_parameters(FilterParameters(**merged))

    def set_parameters(self, parameters: FilterParameters) -> FilterSnapshot:
        """
        Replace the filter parameters.

        Raises:
            RuntimeError: If the controller is closed
        """
        if self._closed:
            raise RuntimeError("UserFilterController is closed")

        previous = self._parameters
        if parameters == previous:
            return self.snapshot()

        self._parameters = parameters

        if parameters.remote_key != previous.remote_key:
            self._restart_query()
        elif self._state is PipelineState.READY:
            self._apply_local_filter()

        self._notify()
        return self.snapshot()

    async def wait_until_settled(self) -> FilterSnapshot:
        """Wait until no query for the current role/age is in flight."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self.snapshot()

    def close(self) -> None:
        """Stop listening: cancel the in-flight query and drop subscribers."""
        if self._closed:
            return
        self._closed = True
        if self._token is not None:
            self._token.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._subscribers.clear()
        logger.debug("Filter controller closed")

    async def __aenter__(self) -> "UserFilterController":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    # -- internals ---------------------------------------------------------

    def _restart_query(self) -> None:
        if self._token is not None:
            self._token.cancel()
            if self.eager_abort and self._task is not None and not self._task.done():
                self._task.cancel()

        self._server_users = ()
        self._users = ()
        self._error = None
        self._status_message = None

        if not self._parameters.has_remote_criteria:
            self._state = PipelineState.IDLE
            self._token = None
            self._task = None
            return

        role, age = self._parameters.remote_key
        token = CancellationToken(label=f"role={role} age={age}")
        self._token = token
        self._state = PipelineState.QUERYING
        self._task = self.remote_stage.issue(self._parameters, partial(self._on_result, token), token)
        logger.debug(f"Issued user query {token!r}")

    def _on_result(self, token: CancellationToken, result: QueryResult) -> None:
        if token is not self._token or self._closed:
            return

        self._server_users = result.users
        self._error = result.error
        self._status_message = result.error.describe() if result.error else None
        self._state = PipelineState.READY
        self._apply_local_filter()

        if result.error:
            logger.info(f"User query failed: {result.error.message}", extra={"kind": result.error.kind})
        else:
            logger.debug(f"User query returned {len(result.users)} users")

        self._notify()

    def _apply_local_filter(self) -> None:
        self._users = tuple(filter_users(
            self._server_users, name=self._parameters.name, company=self._parameters.company,
        ))

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception as e:
                logger.error(f"Filter subscriber failed: {e}", exc_info=True)


def create_filter_controller(
    data_source: UserDataSource,
    settings: Settings | None = None,
    metrics: MetricsCollector | None = None,
) -> UserFilterController:
    """
    Factory function to create a UserFilterController with configuration.

    Args:
        data_source: Collaborator answering role/age queries
        settings: Runtime settings (defaults if None)
        metrics: Metrics collector shared with other components

    Returns:
        Configured UserFilterController

    Example:
        >>> store = InMemoryUserStore(users)
        >>> controller = create_filter_controller(store)
        >>> controller.update(role="editor", age=25)
        >>> snapshot = await controller.wait_until_settled()
    """
    settings = settings or Settings()
    stage = RemoteQueryStage(
        data_source,
        timeout_seconds=settings.query_timeout_seconds,
        metrics=metrics,
    )
    return UserFilterController(stage, eager_abort=settings.eager_abort)
