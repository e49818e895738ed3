"""
Remote (server-side) filtering of users by role and age.

Wraps a UserDataSource call: bounds it with a timeout, checks the payload
against the UserRecord schema and turns every failure into a QueryResult
error value, so the caller never sees an exception.
"""

import asyncio
import time
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError as SchemaValidationError

from userdesk.core.errors import ClientConnectivityError, ServerRejectionError
from userdesk.core.models import FilterParameters, QueryError, QueryResult, UserRecord
from userdesk.observability.logger import get_logger
from userdesk.observability.metrics import MetricsCollector
from userdesk.settings import DEFAULT_QUERY_TIMEOUT_SECONDS
from userdesk.sources.base import UserDataSource

from .cancellation import CancellationToken

logger = get_logger(__name__)


class MalformedPayloadError(ValueError):
    """The data source answered with something that is not a list of users."""


class RemoteQueryStage:
    """
    Asks the data source for the users matching a role/age pair.

    query() yields exactly one QueryResult per call. issue() runs a query in
    the background and hands its result to a callback only while the
    accompanying CancellationToken is still active, which is how superseded
    queries are kept from overwriting newer results.
    """

    def __init__(
        self,
        data_source: UserDataSource,
        timeout_seconds: float = DEFAULT_QUERY_TIMEOUT_SECONDS,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the remote query stage.

        Args:
            data_source: Collaborator that performs the actual lookup
            timeout_seconds: Upper bound on a single data source call
            metrics: Metrics collector (a new one if None)
        """
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")

        self.data_source = data_source
        self.timeout_seconds = timeout_seconds
        self.metrics = metrics or MetricsCollector()

        # Strong references to running tasks; the event loop only keeps weak ones
        self._pending: set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def query(self, params: FilterParameters) -> QueryResult:
        """
        Fetch the users matching params.role and params.age.

        Args:
            params: Filter parameters; only role and age are sent

        Returns:
            QueryResult with users, or with an error and no users
        """
        self.metrics.record_query_issued()
        start = time.monotonic()

        try:
            raw = await asyncio.wait_for(
                self.data_source.fetch_users(role=params.role, age=params.age),
                timeout=self.timeout_seconds,
            )
            result = QueryResult.success(self._parse(raw))

        except (asyncio.TimeoutError, TimeoutError):
            logger.warning(f"User query timed out after {self.timeout_seconds}s",
                           extra={"role": params.role, "age": params.age})
            result = QueryResult.failure(QueryError(
                kind="timeout",
                message=f"No response within {self.timeout_seconds:g} seconds",
            ))

        except ClientConnectivityError as e:
            logger.warning(f"User query could not reach the server: {e.message}")
            result = QueryResult.failure(QueryError(kind="client", message=e.message))

        except ServerRejectionError as e:
            logger.warning(f"User query rejected by the server: {e}")
            result = QueryResult.failure(QueryError(
                kind="server", message=e.message, status_code=e.status_code,
            ))

        except (MalformedPayloadError, SchemaValidationError) as e:
            logger.error(f"Data source returned a malformed payload: {e}")
            result = QueryResult.failure(QueryError(
                kind="server", message=f"Malformed user payload: {e}",
            ))

        except Exception as e:
            logger.error(f"Unexpected data source failure: {e}", exc_info=True)
            result = QueryResult.failure(QueryError(kind="client", message=str(e) or type(e).__name__))

        duration = time.monotonic() - start
        self.metrics.record_query_completed(
            "success" if result.ok else result.error.kind, duration
        )
        return result

    def issue(
        self,
        params: FilterParameters,
        deliver: Callable[[QueryResult], None],
        token: CancellationToken,
    ) -> asyncio.Task:
        """
        Run a query in the background.

        Must be called from within a running event loop.

        Args:
            params: Filter parameters for this query
            deliver: Called with the result, unless the token was cancelled first
            token: Cancellation token owned by the caller

        Returns:
            The task running the query; cancelling it aborts the data source call
        """
        task = asyncio.get_running_loop().create_task(
            self._run(params, deliver, token),
            name=f"user-query role={params.role} age={params.age}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _run(
        self,
        params: FilterParameters,
        deliver: Callable[[QueryResult], None],
        token: CancellationToken,
    ) -> QueryResult | None:
        result = await self.query(params)

        if token.cancelled:
            self.metrics.record_query_superseded()
            logger.debug(f"Discarding superseded result for {token!r}")
            return None

        deliver(result)
        return result

    @staticmethod
    def _parse(raw: Any) -> list[UserRecord]:
        if isinstance(raw, (str, bytes, Mapping)) or not hasattr(raw, "__iter__"):
            raise MalformedPayloadError(f"expected a list of users, got {type(raw).__name__}")

        users = []
        for item in raw:
            if isinstance(item, UserRecord):
                users.append(item)
            elif isinstance(item, Mapping):
                users.append(UserRecord.model_validate(dict(item)))
            else:
                raise MalformedPayloadError(f"expected a user object, got {type(item).__name__}")
        return users
