"""
Submission of new users through a write collaborator.
"""

from .controller import UserSubmissionController

__all__ = ["UserSubmissionController"]
