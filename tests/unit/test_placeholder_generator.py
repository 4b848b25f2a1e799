import pytest

from app.domain.errors import InvalidAnalysisInput
from app.infrastructure.ai.placeholder_generator import PlaceholderContentGenerator

LONG_TEXT = (
    "Remote work improves productivity because employees avoid commuting and "
    "can structure their day around focused blocks of time."
)


@pytest.fixture()
def generator():
    return PlaceholderContentGenerator()


@pytest.mark.asyncio
async def test_check_fallacies_reports_average_confidence(generator):
    data = await generator.check_fallacies("You are wrong because you are young.")
    assert data["analysis"]["total_fallacies"] == len(data["fallacies"])
    assert data["analysis"]["average_confidence"] == pytest.approx(0.3)


@pytest.mark.asyncio
async def test_summarize_styles(generator):
    brief = await generator.summarize(LONG_TEXT, max_length=5)
    bullets = await generator.summarize(LONG_TEXT, style="bullet_points")

    assert brief["summary"].endswith("...")
    assert len(brief["summary"].split()) <= 5
    assert bullets["summary"].count("•") == 3
    assert bullets["style"] == "bullet_points"


@pytest.mark.asyncio
async def test_suggest_counter_respects_max_suggestions(generator):
    data = await generator.suggest_counter(LONG_TEXT, max_suggestions=2)
    assert len(data["counter_arguments"]) == 2
    assert data["metadata"]["average_strength"] == pytest.approx(0.75)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method, value",
    [
        ("check_fallacies", "too short"),
        ("fact_check", "   "),
        ("summarize", "Not quite fifty characters of content."),
        ("suggest_counter", "Cats are best."),
        ("analyze_strength", "Dogs are best."),
    ],
)
async def test_short_input_is_rejected(generator, method, value):
    with pytest.raises(InvalidAnalysisInput):
        await getattr(generator, method)(value)
