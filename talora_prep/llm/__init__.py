"""
LLM service modules for Groq Cloud integration.
"""
from .groq_service import initialize_llm, try_initialize_llm, create_chain, run_chain
from .response_parser import LLMResponseError, extract_json_object, parse_structured_response

__all__ = [
    'initialize_llm',
    'try_initialize_llm',
    'create_chain',
    'run_chain',
    'LLMResponseError',
    'extract_json_object',
    'parse_structured_response'
]
