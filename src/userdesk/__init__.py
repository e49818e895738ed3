"""
userdesk: user directory filtering and submission.
"""

__version__ = "0.1.0"
