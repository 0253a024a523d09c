"""
Profile generation orchestrator.

Single entry point turning user text into a ProfileResult:

1. Topic: keyword classifier, optionally the LLM when keywords yield GENERAL
2. Prompt: mode-aware system prompt (few-shot, label library)
3. Attempt: LLM call under a fixed timeout, response repair, strict parse
4. Retry: RetryController policy (degrade / one corrective retry / raise)
5. Post-processing: canonicalize + dedupe scores, dampen unsupported scores

The summary is left as the model wrote it; `reconcile_summary` is a
separate, optional step for callers that want it aligned with the scores.

Usage:
    orchestrator = ProfileOrchestrator(llm_client)
    result = await orchestrator.generate_profile(text, mode="balanced")
"""

import asyncio
import time
from typing import Optional, Union

import structlog

from profile_inference.config import settings
from profile_inference.consistency.engine import get_consistency_engine
from profile_inference.consistency.scores import dedupe_orientations
from profile_inference.llm.base_client import BaseLLMClient
from profile_inference.llm.exceptions import LLMTimeoutError
from profile_inference.llm.prompt_builder import PromptBuilder, get_prompt_builder
from profile_inference.models.enums import AnalysisMode, Locale, MacroCategory
from profile_inference.models.generation_metadata import RetryMetadata
from profile_inference.models.profile_models import ProfileDraft, ProfileResult
from profile_inference.monitoring.metrics import profile_requests_total, topic_classifications_total
from profile_inference.retry.controller import AttemptResult, RetryController
from profile_inference.retry.exceptions import ProfileGenerationError
from profile_inference.topics.classifier import classify, classify_with_llm
from profile_inference.validation.response_normalizer import normalize_response
from profile_inference.validation.structured_parser import ParseResult, parse_output

logger = structlog.get_logger(__name__)


class ProfileOrchestrator:
    """
    Coordinates classifier, prompt builder, transport, parser, retry
    controller and consistency engine for one request at a time.

    Holds no per-request state; one instance serves concurrent requests.
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        prompt_builder: Optional[PromptBuilder] = None,
        retry_controller: Optional[RetryController] = None,
        timeout_seconds: Optional[float] = None,
        default_mode: Union[AnalysisMode, str, None] = None,
        default_locale: Union[Locale, str, None] = None,
        enable_llm_topic_fallback: Optional[bool] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            llm_client: Transport used for every LLM call
            prompt_builder: Prompt builder (None = shared, settings-configured)
            retry_controller: Retry policy (None = one corrective retry from settings)
            timeout_seconds: Bound for one LLM invocation (None = LLM_TIMEOUT_SECONDS)
            default_mode: Mode when a call passes none (None = ANALYSIS_MODE)
            default_locale: Locale when a call passes none (None = LOCALE)
            enable_llm_topic_fallback: Ask the LLM when keywords yield GENERAL
        """
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder or get_prompt_builder()
        self.retry_controller = retry_controller or RetryController(settings.MAX_CORRECTIVE_RETRIES)
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.LLM_TIMEOUT_SECONDS
        self.default_mode = AnalysisMode(default_mode or settings.ANALYSIS_MODE)
        self.default_locale = Locale.coerce(default_locale or settings.LOCALE)
        self.enable_llm_topic_fallback = (
            settings.ENABLE_LLM_TOPIC_FALLBACK if enable_llm_topic_fallback is None else enable_llm_topic_fallback
        )

    async def classify_topic(self, text: str) -> MacroCategory:
        """
        Macro category of the text.

        Keyword match first; the LLM is consulted only when that yields
        GENERAL and the fallback is enabled.
        """
        category = classify(text)
        method = "keyword"
        if category is MacroCategory.GENERAL and self.enable_llm_topic_fallback:
            category = await classify_with_llm(text, self.llm_client, self.prompt_builder)
            method = "llm"
        topic_classifications_total.labels(category=category.value, method=method).inc()
        return category

    async def _invoke(self, system_prompt: str, user_text: str):
        request = self.prompt_builder.build_request(system_prompt, user_text)
        try:
            return await asyncio.wait_for(self.llm_client.generate(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise LLMTimeoutError(
                f"LLM invocation timed out after {self.timeout_seconds}s",
                details={"timeout": self.timeout_seconds, "model": request.model},
            ) from e

    @staticmethod
    def parse_response(raw: str, mode: AnalysisMode) -> ParseResult:
        """
        Repair raw model text, then parse it strictly.

        Unrecoverable text arrives as the canonical failure object: it parses
        in fast mode and fails the rich schema (no reasoning) otherwise.
        """
        normalized = normalize_response(raw)
        return parse_output(normalized.to_json(), mode)

    def postprocess(self, draft: ProfileDraft, locale: Locale) -> ProfileDraft:
        """Canonicalize and dedupe scores, then dampen scores the evidence does not support."""
        deduped = draft.model_copy(update={"value_orientation": dedupe_orientations(draft.value_orientation)})
        return get_consistency_engine(locale).adjust_scores_by_evidence(deduped)

    async def generate_profile(
        self,
        text: str,
        category: Union[MacroCategory, str, None] = None,
        mode: Union[AnalysisMode, str, None] = None,
        locale: Union[Locale, str, None] = None,
    ) -> ProfileResult:
        """
        Generate a value-orientation profile.

        Args:
            text: User content (already formatted for the model)
            category: Macro category (None = classify the text)
            mode: Analysis mode (None = default mode)
            locale: Output locale (None = default locale)

        Returns:
            ProfileResult with the profile and retry metadata

        Raises:
            LLMTimeoutError: An invocation exceeded the timeout
            LLMClientError: Transport failure (not retried here)
            ProfileGenerationError: Output still invalid after the retry
        """
        start_time = time.time()
        mode = AnalysisMode(mode) if mode else self.default_mode
        locale = Locale.coerce(locale) if locale else self.default_locale
        category = MacroCategory(category) if category else await self.classify_topic(text)

        logger.info(
            "profile_generation_started",
            mode=mode.value,
            category=category.value,
            locale=locale.value,
            text_length=len(text or ""),
        )

        async def attempt(feedback: Optional[Exception]) -> AttemptResult:
            if feedback is None:
                system_prompt = self.prompt_builder.build_system_prompt(mode, category, text, locale)
            else:
                system_prompt = self.prompt_builder.build_retry_prompt(mode, category, text, feedback, locale)
            response = await self._invoke(system_prompt, text or "")
            return AttemptResult(
                parse_result=self.parse_response(response.content, mode),
                model_version=response.model_version,
            )

        try:
            outcome = await self.retry_controller.execute(attempt, mode, category, locale)
        except LLMTimeoutError:
            profile_requests_total.labels(mode=mode.value, outcome="timeout").inc()
            raise
        except ProfileGenerationError:
            profile_requests_total.labels(mode=mode.value, outcome="failed").inc()
            raise
        except Exception:
            profile_requests_total.labels(mode=mode.value, outcome="error").inc()
            raise

        profile = outcome.profile if outcome.degraded else self.postprocess(outcome.profile, locale)
        total_latency_ms = int((time.time() - start_time) * 1000)

        metadata = RetryMetadata(
            total_attempts=outcome.attempts,
            retried=outcome.retried,
            final_state=outcome.state.value,
            total_latency_ms=total_latency_ms,
            model_version=outcome.model_version,
            validation_failures=outcome.validation_failures,
        )

        result_outcome = "degraded" if outcome.degraded else "success"
        profile_requests_total.labels(mode=mode.value, outcome=result_outcome).inc()
        logger.info(
            "profile_generation_completed",
            outcome=result_outcome,
            mode=mode.value,
            category=category.value,
            attempts=outcome.attempts,
            labels=len(profile.value_orientation),
            total_latency_ms=total_latency_ms,
        )

        return ProfileResult(
            profile=profile,
            category=category,
            mode=mode,
            locale=locale.value,
            metadata=metadata,
            degraded=outcome.degraded,
        )

    def reconcile_summary(
        self,
        profile: ProfileDraft,
        mode: Union[AnalysisMode, str, None] = None,
        locale: Union[Locale, str, None] = None,
    ) -> ProfileDraft:
        """Optional post-processing: align the summary with the scores and resolve conflicts."""
        mode = AnalysisMode(mode) if mode else self.default_mode
        locale = Locale.coerce(locale) if locale else self.default_locale
        return get_consistency_engine(locale).reconcile_summary(profile, mode)
