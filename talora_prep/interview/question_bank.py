"""
Static question bank used when the LLM is unavailable or unusable.

Templates are formatted with job_role, skill_text (up to two skills joined
with "and") and single_skill.
"""
from typing import Dict, List, Optional, Sequence

from .models import Difficulty

FIRST_QUESTION_TOPICS = ["experience", "motivation", "skills", "projects", "challenges", "goals"]

TOPIC_FOCUS = {
    "experience": "their background and experience",
    "motivation": "what drew them to this field",
    "skills": "their technical skills",
    "projects": "recent projects they worked on",
    "challenges": "challenges they faced",
    "goals": "their career goals",
}

FIRST_QUESTIONS = [
    "I'm curious - what got you interested in {job_role} work in the first place?",
    "Before we dive in, I'd love to hear about a recent project where you worked with {skill_text}. What was that like?",
    "What do you find most engaging about working as a {job_role}?",
    "Can you walk me through your experience with {skill_text}? I'm interested in your background there.",
    "I'd like to understand your journey - what drew you to pursue {job_role} as a career?",
    "Tell me about your experience with {skill_text}. What have you worked on that you're particularly proud of?",
    "What aspects of {job_role} work do you find most challenging, and how do you approach those challenges?",
    "I'm interested in your background - can you share a bit about how you got started with {skill_text}?",
]

QUESTION_BANK: Dict[Difficulty, List[str]] = {
    Difficulty.EASY: [
        "I'd like to understand your background better - can you tell me about your experience working with {skill_text}?",
        "What's been your favorite part about working as a {job_role} so far?",
        "Can you walk me through what a typical project looks like for you as a {job_role}?",
        "How did you first get interested in {job_role} work?",
        "I'm curious about your journey - what led you to focus on {single_skill}?",
    ],
    Difficulty.MEDIUM: [
        "Can you walk me through a challenging project you worked on that involved {skill_text}? What made it challenging?",
        "When you're facing a complex problem in {job_role} work, what's your approach? Can you give me an example?",
        "Tell me about a time you had to quickly learn something new related to {single_skill} for a project. How did that go?",
        "How do you stay up to date with changes and trends in {skill_text}? What resources do you use?",
        "Can you describe a situation where you had to collaborate with others on a {job_role} project? What was your role?",
    ],
    Difficulty.HARD: [
        "Let's say you're designing a complex system for {job_role}. Walk me through your thought process and how you'd approach it.",
        "Tell me about a time you had to make a really difficult technical decision involving {skill_text}. What factors did you consider?",
        "Imagine you're working on a {job_role} project with conflicting requirements and tight deadlines. How would you prioritize and handle that?",
        "What's the most technically challenging problem you've solved in {job_role} work? I'd love to hear how you approached it.",
        "If you were architecting a large-scale solution using {skill_text}, what would be your key considerations and why?",
    ],
}

PRACTICE_QUESTIONS = [
    "Tell me about your experience with {single_skill} and how you've applied it in real projects.",
    "Why are you interested in the {job_role} position?",
    "Describe a challenging project you've worked on that relates to this role. What was your approach and what did you learn?",
    "How do you stay updated with the latest trends and technologies in {single_skill}?",
    "Tell me about a time when you had to work under pressure or meet a tight deadline. How did you handle it?",
    "How would you approach a problem that requires {second_skill}? Walk me through your thought process.",
    "Where do you see yourself in the next 2-3 years, and how does this role fit into your career goals?",
]

VARIATION_SUFFIXES = [
    ", and can you walk me through a specific example?",
    ". I'm particularly interested in the technical details.",
    ". What challenges did you face?",
    "? How did you approach it?",
]


def skill_context(skills: Optional[Sequence[str]], job_role: str) -> Dict[str, str]:
    """Values substituted into question templates."""
    specific = [s.strip() for s in (skills or []) if s and s.strip()][:2]
    return {
        "job_role": job_role,
        "skill_text": " and ".join(specific) if specific else "the required technical skills",
        "single_skill": specific[0] if specific else "your technical skills",
        "second_skill": specific[1] if len(specific) > 1 else "your core technical skills",
    }


def render(templates: Sequence[str], job_role: str, skills: Optional[Sequence[str]]) -> List[str]:
    context = skill_context(skills, job_role)
    return [template.format(**context) for template in templates]


def bank_questions(difficulty: Difficulty, job_role: str, skills: Optional[Sequence[str]]) -> List[str]:
    """Rendered bank questions for one tier."""
    return render(QUESTION_BANK[Difficulty(difficulty)], job_role, skills)


def first_questions(job_role: str, skills: Optional[Sequence[str]]) -> List[str]:
    return render(FIRST_QUESTIONS, job_role, skills)


def practice_questions(job_role: str, skills: Optional[Sequence[str]]) -> List[str]:
    return render(PRACTICE_QUESTIONS, job_role, skills)
