from __future__ import annotations

from typing import Any, Protocol


class ContentGeneratorPort(Protocol):
    """The AI provider behind the analysis endpoints. Every call is expensive."""

    async def check_fallacies(self, text: str) -> dict[str, Any]: ...

    async def fact_check(self, text: str) -> dict[str, Any]: ...

    async def summarize(
        self, content: str, *, max_length: int = 200, style: str = "brief"
    ) -> dict[str, Any]: ...

    async def suggest_counter(
        self, argument: str, *, context: str | None = None, max_suggestions: int = 3
    ) -> dict[str, Any]: ...

    async def analyze_strength(self, argument: str) -> dict[str, Any]: ...
