"""Terminal front end — analyze image files and print each report."""
import json
import logging
from pathlib import Path

from rich.console import Console

from imagecheck.constants import ERR_UNSUPPORTED_MIME
from imagecheck.errors import InferenceError, SchemaValidationError, UnsupportedImageError
from imagecheck.formatting import describe_error, format_text, to_renderable
from imagecheck.images import guess_mime_type
from imagecheck.inference.client import InferenceClient
from imagecheck.presenter import render
from imagecheck.session import AnalysisSession

logger = logging.getLogger(__name__)


async def analyze_paths(
    client: InferenceClient,
    paths: list[Path],
    console: Console,
    output: str = "rich",
) -> int:
    """Analyze each file in turn. Returns the process exit code."""
    session = AnalysisSession(client)
    failures = 0
    try:
        for path in paths:
            try:
                result = await _analyze_file(session, path)
            except (InferenceError, SchemaValidationError) as exc:
                logger.error("%s: %s", path, exc)
                console.print(f"[red]{path}[/red]: {describe_error(exc)}")
                failures += 1
                continue
            except OSError as exc:
                logger.error("Could not read %s: %s", path, exc)
                console.print(f"[red]{path}[/red]: {exc.strerror or exc}")
                failures += 1
                continue

            match output:
                case "json":
                    console.print(
                        json.dumps(result.to_wire(), indent=2),
                        markup=False,
                        highlight=False,
                        soft_wrap=True,
                    )
                case "plain":
                    report = render(result, session.state.image_preview or "")
                    console.print(format_text(report), markup=False, highlight=False)
                case _:
                    report = render(result, session.state.image_preview or "")
                    console.print(to_renderable(report, title=path.name))
    finally:
        await session.close()
    return 1 if failures else 0


async def _analyze_file(session: AnalysisSession, path: Path):
    mime_type = guess_mime_type(path)
    match mime_type:
        case None:
            raise UnsupportedImageError(ERR_UNSUPPORTED_MIME % (path.suffix or path.name))
        case _:
            pass
    return await session.submit(path.read_bytes(), mime_type)
