"""
Talora interview preparation core.

Adaptive practice interviews for candidates:
- Resume / transcript text extraction
- Skill matching between resumes and job descriptions
- Answer evaluation with LLM + deterministic fallbacks
- Adaptive question selection and session aggregation
- Feedback e-mail dispatch
"""

__version__ = "1.0.0"
