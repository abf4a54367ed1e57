"""Prompt text for atomic same-as evidence checks.

Each atomic prompt asks an external adjudicator to judge exactly one evidence
statement against one consideration. The fixed sections below are assembled
by AtomicPromptRenderer around the rendered statements; any change here
changes every rendered prompt byte-for-byte, so treat edits as a format bump.
"""

ATOMIC_PROMPT_TITLE = "# Atomic Evidence Check"

TARGET_SECTION = "Statement: Target owl:sameAs"
ANCHOR_SECTION = "Statement: Anchor schema:validFrom"
EVIDENCE_SECTION = "Statement: Evidence under review"

ATOMIC_PROMPT_INTRODUCTION = [
    "- You are reading an atomic evidence-evaluation prompt for one owl:sameAs validity decision.",
    "- Your goal is to evaluate exactly one evidence statement against one consideration for the anchor schema:validFrom statement.",
    "- The statement chain is: target owl:sameAs statement -> anchor schema:validFrom statement -> evidence statement under review.",
    "- All inputs are provided as subject-predicate-object triples and report attributes.",
]

ATOMIC_PROMPT_TASK = [
    "Evaluate one evidence statement for one consideration.",
    "- schema:validFrom is the real-world validity start for the owl:sameAs claim.",
    "- provenance/observation timestamps are separate from schema:validFrom.",
]

ATOMIC_PROMPT_RETURN_JSON = [
    "- decision (supports | contradicts | insufficient)",
    "- confidence (0.0 to 1.0)",
    "- reason",
]

ATOMIC_PROMPT_RULES = [
    "- Use only the statements in this prompt.",
    "- Evaluate this one evidence statement only.",
    "- Do not make an overall identity decision here.",
    "- Do not invent facts beyond the provided statements.",
]

# Report block normalisation
CANONICAL_REPORT_NAME = "owl:sameAs validFrom evidence report"
REPORT_NAME_REQUIRED_MARKERS = ("owl:sameAs", "validFrom")
CONFIDENCE_PREFIX_PATTERN = r"^Estimated validFrom confidence=[0-9]*\.?[0-9]+\.\s*"

NO_REPORT = "none"


__all__ = [
    "ATOMIC_PROMPT_TITLE",
    "TARGET_SECTION",
    "ANCHOR_SECTION",
    "EVIDENCE_SECTION",
    "ATOMIC_PROMPT_INTRODUCTION",
    "ATOMIC_PROMPT_TASK",
    "ATOMIC_PROMPT_RETURN_JSON",
    "ATOMIC_PROMPT_RULES",
    "CANONICAL_REPORT_NAME",
    "REPORT_NAME_REQUIRED_MARKERS",
    "CONFIDENCE_PREFIX_PATTERN",
    "NO_REPORT",
]
