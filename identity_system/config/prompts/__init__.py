"""Prompt templates for evaluation-prompt synthesis.

Modules:
    atomic_prompts: Fixed sections of the atomic same-as evidence check
"""

from identity_system.config.prompts.atomic_prompts import (
    ATOMIC_PROMPT_TITLE,
    ATOMIC_PROMPT_INTRODUCTION,
    ATOMIC_PROMPT_TASK,
    ATOMIC_PROMPT_RETURN_JSON,
    ATOMIC_PROMPT_RULES,
    TARGET_SECTION,
    ANCHOR_SECTION,
    EVIDENCE_SECTION,
    CANONICAL_REPORT_NAME,
    REPORT_NAME_REQUIRED_MARKERS,
    CONFIDENCE_PREFIX_PATTERN,
    NO_REPORT,
)

__all__ = [
    "ATOMIC_PROMPT_TITLE",
    "ATOMIC_PROMPT_INTRODUCTION",
    "ATOMIC_PROMPT_TASK",
    "ATOMIC_PROMPT_RETURN_JSON",
    "ATOMIC_PROMPT_RULES",
    "TARGET_SECTION",
    "ANCHOR_SECTION",
    "EVIDENCE_SECTION",
    "CANONICAL_REPORT_NAME",
    "REPORT_NAME_REQUIRED_MARKERS",
    "CONFIDENCE_PREFIX_PATTERN",
    "NO_REPORT",
]
