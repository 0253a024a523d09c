"""
Retry controller for profile generation.

Failure policy, applied to whatever each attempt produced:

1. Content-filter refusal: return a degraded profile, never retry (this
   holds for the corrective retry too)
2. Parse/format/schema/structure/validation failure: exactly one corrective
   retry, the attempt callable receives the error as feedback
3. Anything else (timeouts, transport failures): raised immediately

A second failure is final: raised exceptions propagate unchanged, tagged
parse failures are wrapped in ProfileGenerationError.

Usage:
    controller = RetryController()
    outcome = await controller.execute(attempt, mode, category, locale)
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

import structlog

from profile_inference.llm.exceptions import LLMContentFilterError, is_content_filter_message
from profile_inference.models.enums import AnalysisMode, Locale, MacroCategory
from profile_inference.models.profile_models import ProfileDraft
from profile_inference.monitoring.metrics import content_filter_total, retries_total
from profile_inference.retry.exceptions import ProfileGenerationError
from profile_inference.retry.state import RetryState, RetryStateMachine
from profile_inference.topics.classifier import category_name
from profile_inference.validation.exceptions import ValidationError
from profile_inference.validation.structured_parser import ParseResult

logger = structlog.get_logger(__name__)

RETRYABLE_ERROR_RE = re.compile(r"parse|format|schema|structure|validation", re.IGNORECASE)

DEGRADED_SUMMARY: dict[Locale, str] = {
    Locale.EN_US: (
        "The model provider declined to analyze this content under its content policy, "
        "so no value orientation could be derived."
    ),
    Locale.ZH_CN: "模型服务商基于内容安全策略拒绝分析该内容，因此无法生成价值取向分析。",
}


class FailureAction(str, Enum):
    DEGRADE = "degrade"
    RETRY = "retry"
    RAISE = "raise"


@dataclass(frozen=True)
class AttemptResult:
    """What one attempt produced: a tagged parse result and the model that answered."""

    parse_result: ParseResult
    model_version: Optional[str] = None


# Called with None for the first attempt and with the previous error for the retry
AttemptFn = Callable[[Optional[Exception]], Awaitable[AttemptResult]]


@dataclass(frozen=True)
class RetryOutcome:
    """
    Final result of the controller.

    Attributes:
        profile: Parsed (or degraded) profile
        state: Terminal state (SUCCEEDED or DEGRADED)
        attempts: LLM invocations made
        retried: Whether the corrective retry was taken
        model_version: Model reported for the last successful attempt
        validation_failures: error.details of failed attempts
    """

    profile: ProfileDraft
    state: RetryState
    attempts: int
    retried: bool
    model_version: Optional[str] = None
    validation_failures: list[dict] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return self.state is RetryState.DEGRADED


def _error_text(error: Exception) -> str:
    return getattr(error, "message", None) or str(error)


def is_content_filter_error(error: Exception) -> bool:
    """
    True for provider policy refusals.

    Validation errors are excluded: their details can quote model output,
    which may itself mention a content policy.
    """
    if isinstance(error, LLMContentFilterError):
        return True
    if isinstance(error, ValidationError):
        return False
    return is_content_filter_message(str(error))


def is_retryable_error(error: Exception) -> bool:
    """True when the error message names a parse/format/schema/structure/validation failure."""
    return bool(RETRYABLE_ERROR_RE.search(_error_text(error)))


def classify_failure(error: Exception) -> FailureAction:
    if is_content_filter_error(error):
        return FailureAction.DEGRADE
    if is_retryable_error(error):
        return FailureAction.RETRY
    return FailureAction.RAISE


def degraded_profile(
    mode: Union[AnalysisMode, str],
    category: Union[MacroCategory, str] = MacroCategory.GENERAL,
    locale: Union[Locale, str, None] = None,
) -> ProfileDraft:
    """
    Placeholder profile for refused content.

    Empty scores, empty evidence (balanced/deep), explanatory summary.
    """
    mode = AnalysisMode(mode)
    locale = Locale.coerce(locale)
    return ProfileDraft(
        nickname="",
        topic_classification=category_name(category, locale),
        reasoning="" if mode.is_rich else None,
        value_orientation=[],
        summary=DEGRADED_SUMMARY[locale],
        evidence=[] if mode.is_rich else None,
    )


class RetryController:
    """
    Drives one profile request through the retry state machine.

    Attributes:
        max_corrective_retries: 0 disables the corrective retry; values
            above 1 are capped at 1
    """

    def __init__(self, max_corrective_retries: int = 1):
        self.max_corrective_retries = max(0, min(1, max_corrective_retries))

    async def execute(
        self,
        attempt: AttemptFn,
        mode: Union[AnalysisMode, str],
        category: Union[MacroCategory, str] = MacroCategory.GENERAL,
        locale: Union[Locale, str, None] = None,
    ) -> RetryOutcome:
        """
        Run the first attempt and, when the policy allows, one retry.

        Args:
            attempt: Coroutine function performing one LLM call + parse
            mode: Analysis mode (shapes the degraded profile)
            category: Request category (shapes the degraded profile)
            locale: Output locale (shapes the degraded profile)

        Returns:
            RetryOutcome in state SUCCEEDED or DEGRADED

        Raises:
            ProfileGenerationError: Tagged parse failure that is final
            Exception: Raised attempt errors that are final, unchanged
        """
        machine = RetryStateMachine()
        failures: list[dict] = []
        feedback: Optional[Exception] = None

        while True:
            raised = False
            try:
                result = await attempt(feedback)
            except Exception as e:
                error: Exception = e
                raised = True
            else:
                if result.parse_result.ok:
                    return self._succeed(machine, result, failures)
                error = result.parse_result.error

            failures.append(dict(getattr(error, "details", {}) or {}, error_type=type(error).__name__))
            action = classify_failure(error)

            logger.warning(
                "profile_attempt_failed",
                state=machine.state.value,
                action=action.value,
                error_type=type(error).__name__,
                error=_error_text(error)[:300],
            )

            if action is FailureAction.DEGRADE and machine.can_transition(RetryState.DEGRADED):
                machine.transition(RetryState.DEGRADED)
                content_filter_total.inc()
                if machine.retried:
                    retries_total.labels(success="false").inc()
                logger.info("profile_degraded_by_content_filter", mode=AnalysisMode(mode).value)
                return RetryOutcome(
                    profile=degraded_profile(mode, category, locale),
                    state=machine.state,
                    attempts=machine.attempts,
                    retried=machine.retried,
                    validation_failures=failures,
                )

            if (
                action is FailureAction.RETRY
                and self.max_corrective_retries > 0
                and machine.can_transition(RetryState.RETRYING)
            ):
                machine.transition(RetryState.RETRYING)
                feedback = error
                logger.info("profile_corrective_retry", error_type=type(error).__name__)
                continue

            machine.transition(RetryState.FAILED)
            if machine.retried:
                retries_total.labels(success="false").inc()

            logger.error(
                "profile_generation_failed",
                attempts=machine.attempts,
                error_type=type(error).__name__,
            )
            if raised:
                raise error
            raise ProfileGenerationError(error, machine.attempts, failures) from error

    def _succeed(
        self,
        machine: RetryStateMachine,
        result: AttemptResult,
        failures: list[dict],
    ) -> RetryOutcome:
        machine.transition(RetryState.SUCCEEDED)
        if machine.retried:
            retries_total.labels(success="true").inc()
            logger.info("profile_corrective_retry_succeeded")
        return RetryOutcome(
            profile=result.parse_result.profile,
            state=machine.state,
            attempts=machine.attempts,
            retried=machine.retried,
            model_version=result.model_version,
            validation_failures=failures,
        )
