"""
Configuration settings for the Resume Architect application.

This file contains configuration for the text-generation providers, the
model parameters used by each AI operation and where the API key is kept.
Switch providers by setting LLM_PROVIDER in the environment or in .env.
"""

from dotenv import load_dotenv
load_dotenv()          # ← must be before os.getenv(...)
import logging
import os
import sys
from pathlib import Path

# LLM Provider Configuration
# Set to "cohere", "openai" or "ollama"
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "cohere").lower()

# Model Configuration
DEFAULT_MODEL = {
    "cohere": "command",
    "openai": "gpt-4o-mini",
    "ollama": "llama3",
}

# Cohere Configuration
COHERE_API_URL = os.getenv("COHERE_API_URL", "https://api.cohere.ai/v1/generate")
COHERE_API_KEY_ENV = "COHERE_API_KEY"

# Environment variable holding each provider's API key
API_KEY_ENV = {
    "cohere": COHERE_API_KEY_ENV,
    "openai": "OPENAI_API_KEY",
}

# Ollama Configuration
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

# Per-operation generation parameters
IMPROVE_PARAMS = {
    "temperature": 0.3,
    "max_tokens": 2000,
}
ANALYZE_PARAMS = {
    "temperature": 0.2,
    "max_tokens": 2500,
}

# Where the obfuscated API key lives between sessions
CREDENTIAL_FILE = Path(
    os.getenv("RESUME_ARCHITECT_KEY_FILE", Path.home() / ".resume_architect" / "api_key")
).expanduser()


def get_model_for_provider(provider: str = None) -> str:
    """Get the default model for the specified provider."""
    provider = provider or LLM_PROVIDER
    return DEFAULT_MODEL.get(provider, "command")


def get_api_key_env(provider: str = None) -> str:
    """Get the API key environment variable for the specified provider."""
    provider = (provider or LLM_PROVIDER).lower()
    return API_KEY_ENV.get(provider, f"{provider.upper()}_API_KEY")


def get_credential_file(provider: str = None) -> Path:
    """Key file for the provider; cohere keeps the plain CREDENTIAL_FILE name."""
    provider = (provider or LLM_PROVIDER).lower()
    if provider == "cohere":
        return CREDENTIAL_FILE
    return CREDENTIAL_FILE.with_name(f"{provider}_{CREDENTIAL_FILE.name}")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with optional verbosity"""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Reduce third-party log noise
    logging.getLogger("pdfminer").setLevel(logging.WARNING)
    logging.getLogger("pdfplumber").setLevel(logging.ERROR)
    logging.getLogger("cssutils").setLevel(logging.CRITICAL)
    logging.getLogger("httpx").setLevel(logging.WARNING)
