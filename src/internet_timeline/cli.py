from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .commands import cmd_build, cmd_ping, cmd_validate
from .validator import DocumentKind

app = typer.Typer(add_completion=False)


@app.command()
def ping() -> None:
    """
    Sanity check: config files, data file list and template compilation.
    """
    cmd_ping()


@app.command()
def validate(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON document to check"),
    kind: DocumentKind = typer.Option(DocumentKind.HISTORICAL_EVENTS, "--kind", help="Document kind"),
) -> None:
    """
    Parse a local document and report structural problems.
    """
    raise typer.Exit(code=cmd_validate(path, kind.value))


@app.command()
def build(
    out: Path = typer.Option(Path("build/index.html"), "--out", help="Where to write the page"),
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir", file_okay=False, help="Serve documents from this directory instead of the network"
    ),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override data.base_url"),
    passes: int = typer.Option(1, "--passes", min=1, help="Replay a failed pass up to this many times"),
    json_logs: bool = typer.Option(False, "--json-logs"),
) -> None:
    """
    Load, validate and render the timeline into a single HTML page.
    """
    raise typer.Exit(
        code=cmd_build(out, data_dir=data_dir, base_url=base_url, passes=passes, json_logs=json_logs)
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
