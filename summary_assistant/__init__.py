"""Editorial summary assistant: LLM summaries for text TV and AI-edit audits."""

__version__ = "1.0.0"
