"""Shared types for the vendor wire models and the canonical models."""

from pydantic import BaseModel

from .llm.response import ResponseUsage


class TokenUsage(BaseModel):
    """Internal token usage representation with conversion methods."""

    input_tokens: int = 0
    output_tokens: int = 0

    def add_output(self, output_tokens: int) -> "TokenUsage":
        """Return a copy with ``output_tokens`` more completion tokens."""
        return TokenUsage(
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens + output_tokens,
        )

    def to_usage(self) -> ResponseUsage:
        """Convert to the canonical (OpenAI) usage format."""
        return ResponseUsage(
            prompt_tokens=self.input_tokens,
            completion_tokens=self.output_tokens,
            total_tokens=self.input_tokens + self.output_tokens,
        )
