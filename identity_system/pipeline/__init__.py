"""Pipeline orchestration for evaluation-prompt synthesis.

Provides end-to-end flow from a loaded statement batch to prompt files:
- PromptAtomicPipeline: target claim -> closure -> pools -> rendered prompts
"""

from identity_system.pipeline.prompt_pipeline import PreparedPrompts, PromptAtomicPipeline

__all__ = ["PromptAtomicPipeline", "PreparedPrompts"]
