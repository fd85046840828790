"""Model identifier helpers: base-model reduction and API family detection."""

from __future__ import annotations

from summary_assistant.constants import Models
from summary_assistant.summarizer.models import ModelFamily


def is_fine_tuned(model: str) -> bool:
    return model.lower().startswith(Models.FINE_TUNED_PREFIX)


def base_model(model: str) -> str:
    """
    Reduce a fine-tuned id (``ft:<base>:<org>:<suffix>:<id>``) to ``<base>``.

    Plain ids are returned unchanged.
    """
    if is_fine_tuned(model):
        parts = model.split(":", 2)
        if len(parts) >= 2 and parts[1]:
            return parts[1]
    return model


def model_family(model: str) -> ModelFamily:
    """Return the request dialect a model id requires."""
    if base_model(model).lower().startswith(Models.RESPONSES_PREFIX):
        return ModelFamily.RESPONSES
    return ModelFamily.CHAT_COMPLETIONS


def is_supported_model(model: str) -> bool:
    """Supported base models plus fine-tunes of fine-tunable bases."""
    model_lower = model.lower()
    if model_lower in Models.SUPPORTED_BASE_MODELS:
        return True
    if is_fine_tuned(model_lower):
        return any(
            model_lower.startswith(f"{Models.FINE_TUNED_PREFIX}{base}:")
            for base in Models.FINE_TUNABLE_MODELS
        )
    return False
