"""
Prompt builder for LLM requests.

Responsible for:
- Loading and rendering Jinja2 templates (system, retry, topic prompts)
- Selecting the label catalog slice and few-shot examples per mode
- Embedding schema-derived format instructions
- Truncating user text intelligently (sentence boundary)
- Constructing complete LLMGenerationRequest objects
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

import structlog
from jinja2 import Environment, FileSystemLoader

from profile_inference.config import settings
from profile_inference.examples.retriever import ExampleRetriever, examples_for_mode, get_example_retriever
from profile_inference.labels.catalog import get_label_catalog
from profile_inference.llm.text_utils import truncate_at_sentence_boundary
from profile_inference.models.enums import AnalysisMode, Locale, MacroCategory
from profile_inference.models.llm_models import LLMGenerationRequest
from profile_inference.topics.classifier import category_name
from profile_inference.validation.exceptions import SchemaValidationError
from profile_inference.validation.schemas import get_format_instructions

logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "prompts"

_OUTPUT_LANGUAGE = {
    Locale.EN_US: "English",
    Locale.ZH_CN: "Simplified Chinese",
}


class PromptBuilder:
    """
    Build prompts for profile generation.

    Handles:
    - Template rendering (Jinja2)
    - Mode-dependent rules, label library size and few-shot count
    - Corrective retry prompts with error feedback
    - Topic classification prompt
    """

    def __init__(
        self,
        templates_dir: Optional[Union[str, Path]] = None,
        retriever: Optional[ExampleRetriever] = None,
        locale: Union[Locale, str, None] = None,
        default_model: str = "gpt-4o-mini",
        default_temperature: float = 0.3,
        default_max_tokens: int = 2048,
        retry_feedback_max_chars: int = 600,
        user_text_limit: int = 20000,
    ):
        """
        Initialize prompt builder.

        Args:
            templates_dir: Directory containing prompt templates (None = bundled)
            retriever: Few-shot example retriever (None = shared default)
            locale: Default locale when a call does not pass one
            default_model: Model written into built requests
            default_temperature: Temperature written into built requests
            default_max_tokens: Completion budget written into built requests
            retry_feedback_max_chars: Fast-mode cap on retry error feedback
            user_text_limit: Max user-text characters sent to the model
        """
        self.templates_dir = Path(templates_dir) if templates_dir else DEFAULT_TEMPLATES_DIR
        self.retriever = retriever or get_example_retriever()
        self.locale = Locale.coerce(locale)
        self.default_model = default_model
        self.default_temperature = default_temperature
        self.default_max_tokens = default_max_tokens
        self.retry_feedback_max_chars = retry_feedback_max_chars
        self.user_text_limit = user_text_limit

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,  # We're generating prompts, not HTML
        )

        try:
            self.system_template = self.jinja_env.get_template("system_prompt.j2")
            self.fallback_examples_template = self.jinja_env.get_template("fallback_examples.j2")
            self.retry_template = self.jinja_env.get_template("retry_feedback.j2")
            self.topic_template = self.jinja_env.get_template("topic_classification.j2")
        except Exception as e:
            logger.error("Failed to load prompt templates", error=str(e), templates_dir=str(self.templates_dir))
            raise

        logger.info(
            "PromptBuilder initialized",
            templates_dir=str(self.templates_dir),
            locale=self.locale.value,
            retry_feedback_max_chars=retry_feedback_max_chars,
            user_text_limit=user_text_limit,
        )

    def _resolve_locale(self, locale: Union[Locale, str, None]) -> Locale:
        return self.locale if locale is None else Locale.coerce(locale)

    def build_few_shot_block(
        self,
        mode: AnalysisMode,
        category: MacroCategory,
        input_text: Optional[str],
        locale: Locale,
    ) -> str:
        """
        Retrieved examples, or the static fallback pair.

        Fast mode never retrieves; neither does a call without input text.
        """
        count = examples_for_mode(mode)
        examples = []
        if input_text and count > 0:
            examples = self.retriever.get_relevant_examples(input_text, category, mode, count)

        if examples:
            return self.retriever.format_examples_as_prompt(examples, mode, locale)
        return self.fallback_examples_template.render(locale=locale.value).strip()

    def build_system_prompt(
        self,
        mode: Union[AnalysisMode, str],
        category: Union[MacroCategory, str],
        input_text: Optional[str] = None,
        locale: Union[Locale, str, None] = None,
    ) -> str:
        """
        Render the system prompt.

        Sections: role framing, format instructions, numbered rules,
        few-shot block, label library, and a deep-mode paragraph.

        Args:
            mode: Analysis mode
            category: Macro category scoping the label library
            input_text: User content, used only for example retrieval
            locale: Output language (None = builder default)

        Returns:
            Rendered system prompt as string
        """
        mode = AnalysisMode(mode)
        category = MacroCategory(category)
        locale = self._resolve_locale(locale)

        catalog = get_label_catalog(locale)
        label_library = catalog.format_for_prompt(category, mode)
        few_shot = self.build_few_shot_block(mode, category, input_text, locale)

        prompt = self.system_template.render(
            mode=mode.value,
            format_instructions=get_format_instructions(mode),
            category_name=category_name(category, locale),
            output_language=_OUTPUT_LANGUAGE[locale],
            few_shot=few_shot,
            label_library=label_library,
        ).strip()

        logger.debug(
            "system_prompt_built",
            mode=mode.value,
            category=category.value,
            locale=locale.value,
            labels=len(catalog.labels_for_context(category, mode)),
            prompt_length=len(prompt),
        )
        return prompt

    def build_retry_prompt(
        self,
        mode: Union[AnalysisMode, str],
        category: Union[MacroCategory, str],
        input_text: Optional[str],
        error: Exception,
        locale: Union[Locale, str, None] = None,
    ) -> str:
        """
        System prompt for the single corrective retry.

        The original system prompt is followed by a `【Previous Attempt
        Failed】` section carrying the error and the format instructions
        again. Fast mode sends a short, truncated error message; balanced
        and deep also list the individual schema violations.

        Args:
            mode: Analysis mode
            category: Macro category
            input_text: User content
            error: Failure of the first attempt
            locale: Output language

        Returns:
            Rendered retry prompt
        """
        mode = AnalysisMode(mode)
        locale = self._resolve_locale(locale)
        system_prompt = self.build_system_prompt(mode, category, input_text, locale)

        # The message only; details can quote the raw model output
        error_message = getattr(error, "message", None) or str(error)
        if mode.is_rich:
            validation_errors = error.validation_errors if isinstance(error, SchemaValidationError) else []
        else:
            error_message = truncate_at_sentence_boundary(error_message, self.retry_feedback_max_chars)
            validation_errors = []

        return self.retry_template.render(
            system_prompt=system_prompt,
            error_message=error_message,
            validation_errors=validation_errors,
            format_instructions=get_format_instructions(mode),
            locale=locale.value,
        ).strip()

    def build_topic_prompt(self, locale: Union[Locale, str, None] = None) -> str:
        """System prompt asking the model for a single category id."""
        locale = self._resolve_locale(locale)
        return self.topic_template.render(
            categories=[c.value for c in MacroCategory.specific()],
            locale=locale.value,
        ).strip()

    def prepare_user_text(self, text: str) -> str:
        """Bound user text to the configured limit at a sentence boundary."""
        if len(text) <= self.user_text_limit:
            return text
        truncated = truncate_at_sentence_boundary(text, self.user_text_limit)
        logger.info(
            "user_text_truncated",
            original_length=len(text),
            truncated_length=len(truncated),
        )
        return truncated

    def build_request(self, system_prompt: str, user_text: str, json_mode: bool = True) -> LLMGenerationRequest:
        """
        Wrap prompts into an LLMGenerationRequest with builder defaults.

        Args:
            system_prompt: Rendered system prompt
            user_text: User content (truncated to the configured limit)
            json_mode: Ask the provider for a JSON object

        Returns:
            LLMGenerationRequest ready for a transport
        """
        return LLMGenerationRequest(
            system_prompt=system_prompt,
            user_text=self.prepare_user_text(user_text),
            model=self.default_model,
            temperature=self.default_temperature,
            max_tokens=self.default_max_tokens,
            json_mode=json_mode,
        )


@lru_cache(maxsize=1)
def get_prompt_builder() -> PromptBuilder:
    """Shared PromptBuilder configured from settings."""
    model = settings.OLLAMA_MODEL if settings.LLM_PROVIDER == "ollama" else settings.OPENAI_MODEL
    return PromptBuilder(
        templates_dir=settings.PROMPT_TEMPLATES_DIR,
        locale=settings.LOCALE,
        default_model=model,
        default_temperature=settings.LLM_TEMPERATURE,
        default_max_tokens=settings.LLM_MAX_TOKENS,
        retry_feedback_max_chars=settings.RETRY_FEEDBACK_MAX_CHARS,
        user_text_limit=settings.USER_TEXT_LIMIT,
    )
