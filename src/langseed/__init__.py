"""
Vocabulary-constrained generation engine for language learners.

This package generates word explanations and practice content that only use
words the learner already knows (plus emoji):
- segmenters: per-language text segmentation (Chinese, Japanese, space-delimited)
- validators: known-vocabulary snapshots and constraint checking
- generators: LLM orchestration with bounded retry and feedback
- services: batch word import over a bounded worker pool

**Version**: 0.1.0
**Key Dependencies**: instructor, openai, pydantic, jieba
"""

__version__ = "0.1.0"
__author__ = "Langseed"

__all__ = [
    "__version__",
    "__author__",
]
