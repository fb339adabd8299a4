"""
Prompt templates for the legal assistant.
"""

from .translation import build_translation_prompt
from .memorandum import build_memorandum_prompt, build_memorandum_user_prompt

__all__ = [
    "build_translation_prompt",
    "build_memorandum_prompt",
    "build_memorandum_user_prompt",
]
