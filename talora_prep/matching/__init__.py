"""
Resume / job description skill matching.
"""
from .skill_matcher import SKILL_VOCABULARY, extract_skills, match_score, analyze_skill_match

__all__ = ['SKILL_VOCABULARY', 'extract_skills', 'match_score', 'analyze_skill_match']
