from typing import Protocol

from market_sentinel.data import GenerationResult, ToolConfig


class TextGenerator(Protocol):
    """Interface for a text-completion backend."""

    async def generate(
        self,
        model: str,
        prompt: str,
        config: ToolConfig,
    ) -> GenerationResult:
        """Run a single completion.

        Implementations must not retry or swallow failures; the dispatcher
        decides what to do with them.

        Args:
            model: Model identifier to run the prompt against.
            prompt: Full prompt text.
            config: Tool and output options, passed through unchanged.

        Returns:
            Generated text with any citations the backend attached.
        """
        ...
