"""
Candidate notifications.
"""
from .email_service import EmailService, render_feedback_email, get_email_service

__all__ = ['EmailService', 'render_feedback_email', 'get_email_service']
