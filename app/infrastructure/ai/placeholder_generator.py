from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from app.domain.errors import InvalidAnalysisInput
from app.domain.ports.content_generator import ContentGeneratorPort

MODEL_NAME = "placeholder-v1.0"

_COUNTER_ARGUMENTS: list[dict[str, Any]] = [
    {
        "argument": "Consider the alternative perspective that...",
        "strength": 0.8,
        "type": "logical",
        "supporting_evidence": [
            "Statistical data showing opposite trend",
            "Expert opinions contradicting the claim",
        ],
    },
    {
        "argument": "The evidence presented may be incomplete because...",
        "strength": 0.7,
        "type": "empirical",
        "supporting_evidence": [
            "Additional studies with different conclusions",
            "Methodological concerns with cited research",
        ],
    },
    {
        "argument": "From an ethical standpoint, one might argue...",
        "strength": 0.6,
        "type": "ethical",
        "supporting_evidence": [
            "Moral principles that conflict with the position",
            "Potential negative consequences not considered",
        ],
    },
]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _require_length(value: str | None, minimum: int, label: str) -> str:
    if not value or len(value.strip()) < minimum:
        raise InvalidAnalysisInput(f"{label} must be at least {minimum} characters long")
    return value


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class PlaceholderContentGenerator(ContentGeneratorPort):
    """
    Deterministic stand-in for the AI provider.

    Validates input the way the real endpoints do and returns canned analyses,
    which keeps the cache behaviour observable without network calls.
    """

    async def check_fallacies(self, text: str) -> dict[str, Any]:
        _require_length(text, 10, "Text")
        fallacies = [
            {
                "type": "ad_hominem",
                "confidence": 0.3,
                "explanation": "Potential personal attack detected, but confidence is low",
                "location": {"start": 0, "end": len(text)},
            }
        ]
        return {
            "text": text,
            "fallacies": fallacies,
            "analysis": {
                "total_fallacies": len(fallacies),
                "average_confidence": _mean([f["confidence"] for f in fallacies]),
                "analyzed_at": _now_iso(),
                "model": MODEL_NAME,
            },
        }

    async def fact_check(self, text: str) -> dict[str, Any]:
        _require_length(text, 10, "Text")
        claims = [
            {
                "claim": "Sample claim extracted from text",
                "verdict": "unverifiable",
                "confidence": 0.6,
                "sources": [
                    {
                        "url": "https://example.com/source1",
                        "title": "Example Source",
                        "reliability": 0.8,
                    }
                ],
            }
        ]
        return {
            "text": text,
            "claims": claims,
            "summary": {
                "total_claims": len(claims),
                "verifiable_claims": sum(
                    1 for c in claims if c["verdict"] != "unverifiable"
                ),
                "analyzed_at": _now_iso(),
                "model": MODEL_NAME,
            },
        }

    async def summarize(
        self, content: str, *, max_length: int = 200, style: str = "brief"
    ) -> dict[str, Any]:
        _require_length(content, 50, "Content")
        words = content.split()
        if style == "bullet_points":
            summary = "\n".join(
                [
                    "• Main point 1 from the content",
                    "• Key argument or evidence presented",
                    "• Conclusion or final thoughts",
                ]
            )
        else:
            target = max(1, min(max_length, int(len(words) * 0.3)))
            summary = " ".join(words[:target]) + "..."
        summary_words = len(summary.split())
        return {
            "original_content": content,
            "summary": summary,
            "key_points": [
                "Primary argument presented",
                "Supporting evidence mentioned",
                "Counter-arguments addressed",
            ],
            "word_count": summary_words,
            "compression_ratio": summary_words / len(words),
            "style": style,
            "analyzed_at": _now_iso(),
            "model": MODEL_NAME,
        }

    async def suggest_counter(
        self, argument: str, *, context: str | None = None, max_suggestions: int = 3
    ) -> dict[str, Any]:
        _require_length(argument, 20, "Argument")
        suggestions = [dict(c) for c in _COUNTER_ARGUMENTS[: max(0, max_suggestions)]]
        return {
            "original_argument": argument,
            "context": context,
            "counter_arguments": suggestions,
            "metadata": {
                "total_suggestions": len(suggestions),
                "average_strength": _mean([c["strength"] for c in suggestions]),
                "analyzed_at": _now_iso(),
                "model": MODEL_NAME,
            },
        }

    async def analyze_strength(self, argument: str) -> dict[str, Any]:
        _require_length(argument, 20, "Argument")
        return {
            "argument": argument,
            "analysis": {
                "overall_strength": 0.7,
                "criteria": {
                    "logic": 0.8,
                    "evidence": 0.6,
                    "relevance": 0.9,
                    "clarity": 0.7,
                },
                "strengths": ["Clear logical structure", "Relevant to the topic"],
                "weaknesses": [
                    "Could benefit from more evidence",
                    "Some assumptions not explicitly stated",
                ],
                "suggestions": [
                    "Add statistical evidence to support claims",
                    "Address potential counterarguments",
                    "Clarify underlying assumptions",
                ],
            },
            "analyzed_at": _now_iso(),
            "model": MODEL_NAME,
        }
