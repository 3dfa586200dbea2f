"""
LLM provider factory.

Creates the generation provider named in configuration.
"""

from heirloom.config import get_logger, get_settings
from heirloom.config.settings import LLMSettings
from heirloom.core.interfaces import ILLMProvider

logger = get_logger(__name__)


def create_llm_provider(settings: LLMSettings | None = None) -> ILLMProvider:
    """
    Build a generation provider.

    Args:
        settings: LLM settings (default from environment)

    Returns:
        ILLMProvider instance
    """
    settings = settings or get_settings().llm

    if settings.provider == "openai":
        from heirloom.infrastructure.llm.openai import OpenAIProvider

        return OpenAIProvider(settings)

    elif settings.provider == "ollama":
        from heirloom.infrastructure.llm.ollama import OllamaProvider

        return OllamaProvider(settings)

    else:
        raise ValueError(f"Unknown LLM provider: {settings.provider}")


_llm_provider: ILLMProvider | None = None


def get_llm_provider() -> ILLMProvider:
    """Get or create the configured generation provider singleton."""
    global _llm_provider
    if _llm_provider is None:
        _llm_provider = create_llm_provider()
        logger.info("llm_provider_created", provider=get_settings().llm.provider)
    return _llm_provider
