"""Report → text. Plain text for chat replies, rich renderables for the terminal."""
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from imagecheck.constants import (
    CHART_BAR_CHAR,
    CHART_BAR_WIDTH,
    ICON_INDICATOR_NEGATIVE,
    INDICATOR_MARK_NEGATIVE,
    INDICATOR_MARK_POSITIVE,
    LABEL_ANALYSIS,
    LABEL_CONFIDENCE,
    LABEL_DETECTION_RESULT,
    LABEL_INDICATORS,
    LABEL_PROMPT,
    LABEL_PROMPT_NOTE,
    LABEL_TECHNICAL,
    MSG_ANALYSIS_FAILED,
    MSG_INFERENCE_FAILED,
    MSG_NO_INDICATORS,
    MSG_UNSUPPORTED_IMAGE,
    PERCENT_TOTAL,
)
from imagecheck.errors import InferenceError, UnsupportedImageError
from imagecheck.presenter import IndicatorRow, ProbabilityChart, Report


def _mark(row: IndicatorRow) -> str:
    return INDICATOR_MARK_NEGATIVE if row.icon == ICON_INDICATOR_NEGATIVE else INDICATOR_MARK_POSITIVE


def _bar_widths(chart: ProbabilityChart, width: int = CHART_BAR_WIDTH) -> tuple[int, int]:
    ai = round(chart.ai.value / PERCENT_TOTAL * width)
    human = round(chart.human.value / PERCENT_TOTAL * width)
    return ai, min(human, width - ai)


# ── plain text ────────────────────────────────────────────────────────────────


def format_text(report: Report) -> str:
    badge, chart = report.badge, report.chart
    lines = [
        f"{LABEL_DETECTION_RESULT}: {badge.label}",
        f"Confidence: {badge.confidence:g}%",
        f"{chart.ai.name}: {chart.ai.value:g}% · {chart.human.name}: {chart.human.value:g}%",
        "",
        LABEL_ANALYSIS,
        report.analysis,
        "",
        LABEL_INDICATORS,
    ]
    match report.indicators:
        case ():
            lines.append(MSG_NO_INDICATORS)
        case rows:
            lines += [f"{_mark(row)} {row.text}" for row in rows]
    lines += ["", LABEL_TECHNICAL]
    lines += [f"{entry.label}: {entry.text}" for entry in report.technical]
    lines += ["", LABEL_PROMPT, f'"{report.potential_prompt}"']
    return "\n".join(lines)


def split_message(text: str, limit: int) -> list[str]:
    """Split text into chunks of at most limit characters, on line breaks where possible."""
    chunks: list[str] = []
    current = ""
    for line in text.splitlines(keepends=True):
        while len(line) > limit:
            chunks += [current, line[:limit]]
            current, line = "", line[limit:]
        match len(current) + len(line):
            case n if n > limit:
                chunks.append(current)
                current = line
            case _:
                current += line
    chunks.append(current)
    return [chunk.strip("\n") for chunk in chunks if chunk.strip()]


# ── rich ──────────────────────────────────────────────────────────────────────


def _chart_bar(chart: ProbabilityChart) -> Text:
    ai_width, human_width = _bar_widths(chart)
    bar = Text()
    bar.append(CHART_BAR_CHAR * ai_width, style=chart.ai.color)
    bar.append(CHART_BAR_CHAR * human_width, style=chart.human.color)
    bar.append(f"  {chart.center_value} {chart.center_caption}", style="bold")
    return bar


def to_renderable(report: Report, title: str | None = None) -> RenderableType:
    badge, chart = report.badge, report.chart

    headline = Text()
    headline.append(f"{LABEL_DETECTION_RESULT}  ", style="dim")
    headline.append(badge.label, style=f"bold {badge.color}")
    headline.append(f"   confidence {badge.confidence:g}%", style="dim")

    legend = Text()
    legend.append(f"{chart.ai.name} {chart.ai.value:g}%", style=chart.ai.color)
    legend.append("   ")
    legend.append(f"{chart.human.name} {chart.human.value:g}%", style=chart.human.color)

    indicators = Table.grid(padding=(0, 1))
    match report.indicators:
        case ():
            indicators.add_row(Text(MSG_NO_INDICATORS, style="dim"))
        case rows:
            for row in rows:
                indicators.add_row(Text(_mark(row), style=row.color), Text(row.text))

    technical = Table(show_header=False, box=None, padding=(0, 1))
    technical.add_column(style="bold")
    technical.add_column()
    for entry in report.technical:
        technical.add_row(entry.label, Text(entry.text))

    prompt = Group(
        Text(f'"{report.potential_prompt}"', style="italic"),
        Text(LABEL_PROMPT_NOTE, style="dim", justify="right"),
    )

    return Panel(
        Group(
            headline,
            Panel(Group(_chart_bar(chart), legend), title=LABEL_CONFIDENCE, title_align="left"),
            Panel(Text(report.analysis), title=LABEL_ANALYSIS, title_align="left"),
            Panel(indicators, title=LABEL_INDICATORS, title_align="left"),
            Panel(technical, title=LABEL_TECHNICAL, title_align="left"),
            Panel(prompt, title=LABEL_PROMPT, title_align="left"),
        ),
        title=title,
        border_style=badge.color,
    )


def describe_error(exc: Exception) -> str:
    """User-facing reply for an analysis failure."""
    match exc:
        case UnsupportedImageError():
            return MSG_UNSUPPORTED_IMAGE
        case InferenceError():
            return MSG_INFERENCE_FAILED
        case _:
            return MSG_ANALYSIS_FAILED
