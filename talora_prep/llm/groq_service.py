"""
Groq Cloud LLM service for interview question generation and scoring.

The LLM is an optional, fallible collaborator: every call site in the
interview pipeline has a deterministic fallback, so this module only has
to build the client with a bounded timeout and no retry loop.

Key Features:
- Configurable model parameters (temperature, top_p, etc.)
- Bounded request timeout, retries disabled
- Reproducible results (seed support)
- Prompt chains built the same way for every component
"""
import os
from typing import Any, Dict, List, Optional

from langchain_groq import ChatGroq

# LangChain imports - use langchain_classic for chains
from langchain_core.prompts import PromptTemplate
from langchain_classic.chains import LLMChain
from ..utils.config import (
    GROQ_API_KEY,
    GROQ_MODEL_NAME,
    GROQ_TEMPERATURE,
    GROQ_TOP_P,
    GROQ_MAX_TOKENS,
    GROQ_SEED,
    LLM_TIMEOUT_SECONDS,
    LLM_MAX_RETRIES
)
from ..utils.logger import setup_logger

logger = setup_logger("groq_service")


def initialize_llm(
    api_key: str = None,
    model_name: str = None,
    temperature: float = None,
    top_p: float = None,
    max_tokens: int = None,
    seed: int = None,
    timeout: float = None
) -> ChatGroq:
    """
    Initialize Groq Cloud LLM.

    Args:
        api_key: Groq API key. If None, uses environment variable or config.
        model_name: Model name. If None, uses config default.
        temperature: Temperature setting. If None, uses config default.
        top_p: Top-p setting. If None, uses config default.
        max_tokens: Max tokens. If None, uses config default.
        seed: Random seed. If None, uses config default.
        timeout: Request timeout in seconds. If None, uses config default.

    Returns:
        ChatGroq LLM instance

    Raises:
        ValueError: If no API key is configured
    """
    if api_key is None:
        api_key = os.environ.get("GROQ_API_KEY") or GROQ_API_KEY

    if not api_key:
        raise ValueError("GROQ_API_KEY not found. Please set it in environment or config.")

    if model_name is None:
        model_name = GROQ_MODEL_NAME
    if temperature is None:
        temperature = GROQ_TEMPERATURE
    if top_p is None:
        top_p = GROQ_TOP_P
    if max_tokens is None:
        max_tokens = GROQ_MAX_TOKENS
    if seed is None:
        seed = GROQ_SEED
    if timeout is None:
        timeout = LLM_TIMEOUT_SECONDS

    try:
        llm = ChatGroq(
            groq_api_key=api_key,
            model_name=model_name,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            max_retries=LLM_MAX_RETRIES,
            model_kwargs={
                "top_p": top_p,
                "seed": seed
            }
        )
        logger.info(
            f"✅ Groq Cloud LLM initialized: {model_name} "
            f"(temp={temperature}, timeout={timeout}s, max_tokens={max_tokens})"
        )
        return llm
    except Exception as e:
        logger.error(f"❌ Groq initialization failed: {e}")
        raise


def try_initialize_llm(**kwargs) -> Optional[ChatGroq]:
    """
    Initialize the LLM, returning None when it cannot be configured.

    Components treat a None LLM as "always use the fallback path".
    """
    try:
        return initialize_llm(**kwargs)
    except Exception as e:
        logger.warning(f"⚠️ LLM unavailable, deterministic fallbacks only: {e}")
        return None


def create_chain(llm: Any, template: str, input_variables: List[str], output_key: str) -> LLMChain:
    """
    Create an LLM chain for one prompt template.

    Args:
        llm: Language model (ChatGroq in production, any LangChain runnable in tests)
        template: Prompt template text
        input_variables: Template variables
        output_key: Key holding the generated text in the chain result

    Returns:
        LLMChain
    """
    prompt = PromptTemplate(input_variables=input_variables, template=template)
    return LLMChain(llm=llm, prompt=prompt, output_key=output_key)


def run_chain(chain: LLMChain, inputs: Dict[str, Any]) -> str:
    """Invoke a chain and return its generated text."""
    result = chain.invoke(inputs)
    text = result.get(chain.output_key, "")
    return text if isinstance(text, str) else str(text)
