"""
Text processing utilities for answers, transcripts and resumes.
"""
import re
from typing import List

from nltk.tokenize import RegexpTokenizer

# RegexpTokenizer needs no downloaded NLTK data
_word_tokenizer = RegexpTokenizer(r"[A-Za-z0-9]+(?:[.'+#/-][A-Za-z0-9+#]+)*[+#]*")

# "well" and "like" only count as fillers when followed by a comma
HESITATION_PATTERN = re.compile(
    r"\b(?:um+|uh+|er+|ah+|hmm+|you know)\b|\b(?:well|like),", re.IGNORECASE
)
UNCERTAINTY_PATTERN = re.compile(
    r"\b(maybe|perhaps|i think|i guess|i suppose|kind of|sort of|probably|might|possibly)\b",
    re.IGNORECASE
)
STRUCTURE_PATTERN = re.compile(
    r"\b(first|second|third|then|next|finally|because|since|therefore)\b", re.IGNORECASE
)
EXAMPLE_PATTERN = re.compile(r"\b(for example|for instance|specifically|such as)\b", re.IGNORECASE)
# Short leading clause such as "I see, " or "Got it, "
ACKNOWLEDGMENT_PREFIX = re.compile(r"^[\w' ]{1,20},\s+")
DONT_KNOW_PATTERN = re.compile(
    r"\b(i\s+don'?t\s+know|i'?m\s+not\s+sure|i\s+have\s+no\s+idea|no\s+idea|not\s+really|not\s+sure|unclear|unsure)\b",
    re.IGNORECASE
)


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace and trim."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()


def normalize_question(text: str) -> str:
    """
    Canonical form used to compare questions for duplicates.

    Comparison is case-insensitive and ignores surrounding / repeated whitespace.
    """
    return normalize_whitespace(text).lower()


def question_core(text: str) -> str:
    """
    normalize_question() of a question without its leading acknowledgment.

    "I see, how did you scale it?" and "Got it, how did you scale it?" share
    the core "how did you scale it?".
    """
    return normalize_question(ACKNOWLEDGMENT_PREFIX.sub("", normalize_whitespace(text), count=1))


def tokenize_words(text: str) -> List[str]:
    """Split text into word tokens."""
    if not text:
        return []
    return _word_tokenizer.tokenize(text)


def word_count(text: str) -> int:
    return len(tokenize_words(text))


def count_matches(pattern: re.Pattern, text: str) -> int:
    if not text:
        return 0
    return len(pattern.findall(text))


def has_structure(text: str) -> bool:
    return bool(text) and STRUCTURE_PATTERN.search(text) is not None


def has_examples(text: str) -> bool:
    return bool(text) and EXAMPLE_PATTERN.search(text) is not None


def expresses_uncertainty(text: str) -> bool:
    """True when the answer says the candidate does not know."""
    return bool(text) and DONT_KNOW_PATTERN.search(text) is not None


def clean_generated_question(text: str) -> str:
    """
    Strip wrapping quotes, bold markers and "Question:" prefixes from LLM output.

    Args:
        text: Raw question text

    Returns:
        Cleaned question text
    """
    if not text:
        return ""
    text = text.strip()
    text = re.sub(r'^["\'`]+|["\'`]+$', '', text)
    text = re.sub(r'^\*\*|\*\*$', '', text)
    text = re.sub(r'^Question:\s*', '', text, flags=re.IGNORECASE)
    return normalize_whitespace(text)
