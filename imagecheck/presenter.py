"""render — pure mapping from a validated AnalysisResult to a Report tree.

No I/O and no error handling here: the presenter only ever receives results
that already passed parse_result. Front ends turn the Report into text
(see imagecheck.formatting).
"""
from dataclasses import dataclass
from typing import assert_never

from imagecheck.constants import (
    COLOR_AI,
    COLOR_HUMAN,
    COLOR_UNCERTAIN,
    ICON_INDICATOR_NEGATIVE,
    ICON_INDICATOR_POSITIVE,
    ICON_VERDICT_AI,
    ICON_VERDICT_HUMAN,
    ICON_VERDICT_UNCERTAIN,
    LABEL_AI_SCORE,
    LABEL_AI_SLICE,
    LABEL_HUMAN_SLICE,
    PERCENT_TOTAL,
    TECHNICAL_FIELDS,
)
from imagecheck.models import AnalysisResult, Verdict


@dataclass(frozen=True)
class VerdictBadge:
    verdict: Verdict
    label: str
    color: str
    icon: str
    confidence: float


@dataclass(frozen=True)
class ChartSlice:
    name: str
    value: float
    color: str


@dataclass(frozen=True)
class ProbabilityChart:
    ai: ChartSlice
    human: ChartSlice
    center_value: str
    center_caption: str

    @property
    def slices(self) -> tuple[ChartSlice, ChartSlice]:
        return (self.ai, self.human)


@dataclass(frozen=True)
class IndicatorRow:
    text: str
    icon: str
    color: str


@dataclass(frozen=True)
class TechnicalEntry:
    label: str
    text: str


@dataclass(frozen=True)
class Report:
    image_preview: str
    badge: VerdictBadge
    chart: ProbabilityChart
    analysis: str
    indicators: tuple[IndicatorRow, ...]
    technical: tuple[TechnicalEntry, ...]
    potential_prompt: str


def verdict_style(verdict: Verdict) -> tuple[str, str]:
    """(color, icon) for a verdict."""
    match verdict:
        case Verdict.LIKELY_AI:
            return COLOR_AI, ICON_VERDICT_AI
        case Verdict.LIKELY_HUMAN:
            return COLOR_HUMAN, ICON_VERDICT_HUMAN
        case Verdict.UNCERTAIN:
            return COLOR_UNCERTAIN, ICON_VERDICT_UNCERTAIN
        case _:
            assert_never(verdict)


def split_probability(ai_likelihood: float, human_likelihood: float) -> tuple[float, float]:
    """Renormalize the two likelihoods so the slices sum to 100."""
    total = ai_likelihood + human_likelihood
    match total:
        case 0:
            return 0.0, 0.0
        case _:
            ai_share = round(ai_likelihood / total * PERCENT_TOTAL, 1)
            return ai_share, round(PERCENT_TOTAL - ai_share, 1)


def indicator_style(verdict: Verdict) -> tuple[str, str]:
    # Every row follows the overall verdict, not the indicator's own meaning.
    match verdict:
        case Verdict.LIKELY_AI:
            return ICON_INDICATOR_NEGATIVE, COLOR_AI
        case _:
            return ICON_INDICATOR_POSITIVE, COLOR_HUMAN


def _chart(result: AnalysisResult) -> ProbabilityChart:
    ai_share, human_share = split_probability(result.ai_likelihood, result.human_likelihood)
    return ProbabilityChart(
        ai=ChartSlice(LABEL_AI_SLICE, ai_share, COLOR_AI),
        human=ChartSlice(LABEL_HUMAN_SLICE, human_share, COLOR_HUMAN),
        center_value=f"{ai_share:g}%",
        center_caption=LABEL_AI_SCORE,
    )


def render(result: AnalysisResult, image_preview: str) -> Report:
    color, icon = verdict_style(result.verdict)
    row_icon, row_color = indicator_style(result.verdict)
    return Report(
        image_preview=image_preview,
        badge=VerdictBadge(
            verdict=result.verdict,
            label=result.verdict.label,
            color=color,
            icon=icon,
            confidence=result.confidence_score,
        ),
        chart=_chart(result),
        analysis=result.analysis,
        indicators=tuple(
            IndicatorRow(text=text, icon=row_icon, color=row_color)
            for text in result.indicators
        ),
        technical=tuple(
            TechnicalEntry(label=label, text=getattr(result.technical_details, field))
            for label, field in TECHNICAL_FIELDS
        ),
        potential_prompt=result.potential_prompt,
    )
