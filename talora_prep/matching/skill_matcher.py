"""
Skill matching between resumes and job descriptions.

Skills are detected against a fixed vocabulary (case-insensitive, whole-word
match) and compared as sets. All functions are pure.
"""
import math
import re
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from ..utils.config import RESUME_PREVIEW_CHARS

SKILL_VOCABULARY = (
    "Java", "Spring Boot", "MongoDB", "React", "Node.js",
    "JavaScript", "Python", "TypeScript", "Docker", "Kubernetes",
    "AWS", "CI/CD", "Git", "PostgreSQL", "MySQL",
    "Azure", "GCP", "Terraform", "Linux", "SQL",
    "GraphQL", "Django", "Flask", "FastAPI", "Jenkins",
    "Angular", "Vue", "HTML", "CSS", "Redis",
    "Kafka", "Spark", "Machine Learning", "Deep Learning", "NLP",
    "TensorFlow", "PyTorch", "Pandas", "C++", "C#",
    "Golang", "Rust", "Microservices", "Agile", "Scrum",
)

STRONG_MATCH_THRESHOLD = 80


def _skill_pattern(skill: str) -> re.Pattern:
    # Word boundaries that also work for skills ending in symbols (C++, C#, Node.js)
    return re.compile(
        r"(?<![A-Za-z0-9])" + re.escape(skill) + r"(?![A-Za-z0-9+#])",
        re.IGNORECASE
    )


_PATTERNS = {skill: _skill_pattern(skill) for skill in SKILL_VOCABULARY}


def extract_skills(text: str, vocabulary: Optional[Iterable[str]] = None) -> FrozenSet[str]:
    """
    Extract vocabulary skills mentioned in text.

    Args:
        text: Resume, job description or answer text
        vocabulary: Optional custom vocabulary. Default: SKILL_VOCABULARY

    Returns:
        Frozen set of canonical skill names found in text
    """
    if not text:
        return frozenset()
    if vocabulary is None:
        patterns = _PATTERNS
    else:
        patterns = {skill: _PATTERNS.get(skill) or _skill_pattern(skill) for skill in vocabulary}
    return frozenset(skill for skill, pattern in patterns.items() if pattern.search(text))


def match_score(resume_skills: Set[str], job_skills: Set[str]) -> int:
    """
    Percentage of job skills present in the resume.

    Returns:
        Integer in [0, 100]; 0 when the job lists no vocabulary skills
    """
    if not job_skills:
        return 0
    matched = len(set(resume_skills) & set(job_skills))
    return int(math.floor(100 * matched / len(job_skills) + 0.5))


def _ordered(skills: Iterable[str]) -> List[str]:
    order = {skill: i for i, skill in enumerate(SKILL_VOCABULARY)}
    return sorted(skills, key=lambda s: (order.get(s, len(order)), s.lower()))


def analyze_skill_match(resume_text: str, job_description: str) -> Dict:
    """
    Full skill comparison of a resume against a job description.

    Args:
        resume_text: Resume text
        job_description: Job description text

    Returns:
        Dictionary with:
        - match_score: 0-100
        - matching_skills / missing_skills / extra_skills: ordered lists
        - total_job_skills / total_resume_skills
        - reason: human-readable verdict
        - resume_preview: first characters of the resume
    """
    resume_skills = extract_skills(resume_text)
    job_skills = extract_skills(job_description)
    score = match_score(resume_skills, job_skills)

    if score > STRONG_MATCH_THRESHOLD:
        reason = "Strong match - candidate has most required skills."
    else:
        reason = "Weaker match - missing some key job requirements."

    return {
        "match_score": score,
        "matching_skills": _ordered(resume_skills & job_skills),
        "missing_skills": _ordered(job_skills - resume_skills),
        "extra_skills": _ordered(resume_skills - job_skills),
        "total_job_skills": len(job_skills),
        "total_resume_skills": len(resume_skills),
        "reason": reason,
        "resume_preview": (resume_text or "")[:RESUME_PREVIEW_CHARS],
    }
