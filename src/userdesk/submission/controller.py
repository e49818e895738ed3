"""
Submission of new users.

The controller re-validates a draft before handing it to the write
collaborator and turns every outcome into a SubmitOutcome.
"""

import asyncio
from collections.abc import Mapping
from typing import Any

from userdesk.core.errors import ClientConnectivityError, ServerRejectionError
from userdesk.core.models import SubmitError, SubmitOutcome, UserRecord, ValidationOutcome
from userdesk.core.user_validator import UserValidator
from userdesk.observability.logger import get_logger, log_operation
from userdesk.observability.metrics import MetricsCollector
from userdesk.settings import DEFAULT_QUERY_TIMEOUT_SECONDS
from userdesk.sources.base import UserWriter

logger = get_logger(__name__)


class UserSubmissionController:
    """
    Gates and performs the creation of a new user.

    A draft that fails validation never reaches the writer. The draft passed
    in is only read.
    """

    def __init__(
        self,
        writer: UserWriter,
        validator: UserValidator | None = None,
        timeout_seconds: float = DEFAULT_QUERY_TIMEOUT_SECONDS,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the submission controller.

        Args:
            writer: Collaborator that stores new users
            validator: Draft validator (default field rules if None)
            timeout_seconds: Upper bound on a single write
            metrics: Metrics collector (a new one if None)
        """
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")

        self.writer = writer
        self.validator = validator or UserValidator()
        self.timeout_seconds = timeout_seconds
        self.metrics = metrics or MetricsCollector()

    def validation(self, draft: Any) -> ValidationOutcome:
        """Per-field messages for the draft as it currently stands."""
        return self.validator.validate(draft)

    def can_submit(self, draft: Any) -> bool:
        return self.validator.is_valid(draft)

    async def submit(self, draft: Any) -> SubmitOutcome:
        """
        Validate the draft and, if valid, ask the writer to store it.

        Args:
            draft: Mapping of draft fields or a UserRecord

        Returns:
            SubmitOutcome with the new user's id, or with an error
        """
        outcome = self.validator.validate(draft)
        if not outcome.valid:
            return self._reject(outcome)

        user = _to_record(draft)

        try:
            with log_operation("submit_user", logger=logger, user_name=user.name):
                user_id = await asyncio.wait_for(
                    self.writer.create_user(user), timeout=self.timeout_seconds
                )

        except (asyncio.TimeoutError, TimeoutError):
            return self._fail(SubmitError(
                kind="timeout",
                message=f"No response within {self.timeout_seconds:g} seconds",
            ))

        except ClientConnectivityError as e:
            return self._fail(SubmitError(kind="client", message=e.message))

        except ServerRejectionError as e:
            return self._fail(SubmitError(
                kind="server", message=e.message, status_code=e.status_code,
            ))

        except Exception as e:
            logger.error(f"Unexpected error from user writer: {e}", exc_info=True)
            return self._fail(SubmitError(kind="client", message=str(e) or type(e).__name__))

        self.metrics.record_submission("success")
        return SubmitOutcome(
            success=True,
            user_id=user_id,
            status_message=f"Added user {user.name}",
        )

    def _reject(self, outcome: ValidationOutcome) -> SubmitOutcome:
        message = "; ".join(outcome.field_errors.values()) or outcome.schema_error

        logger.info(f"Draft rejected before submission: {message}",
                    extra={"failed_rules": outcome.failed_rules})
        self.metrics.record_submission("validation", outcome.field_errors)
        return SubmitOutcome(
            success=False,
            error=SubmitError(kind="validation", message=message, field_errors=outcome.field_errors),
            status_message=message,
        )

    def _fail(self, error: SubmitError) -> SubmitOutcome:
        logger.warning(f"User submission failed ({error.kind}): {error.message}")
        self.metrics.record_submission(error.kind)
        return SubmitOutcome(success=False, error=error, status_message=error.message)


def _to_record(draft: Any) -> UserRecord:
    if isinstance(draft, UserRecord):
        return draft.model_copy()
    return UserRecord.model_validate(dict(draft) if isinstance(draft, Mapping) else draft)
