from __future__ import annotations

import asyncio
from dataclasses import replace
from pathlib import Path
from typing import Optional

from rich import print

from . import __version__
from .app import run_pipeline
from .config import load_config, repo_root
from .logging_setup import configure_logging
from .template_engine import TemplateEngine, default_loader
from .transports import DirectoryTransport
from .validator import JSONValidator, parse_and_validate


def cmd_ping() -> None:
    cfg = load_config()
    root = repo_root()

    print(f"[bold]internet-timeline[/bold] version={__version__}")
    print(f"env={cfg.env}")
    print(f"repo_root={root}")

    settings_path = root / "configs" / "settings.yaml"
    print(f"settings.yaml exists={settings_path.exists()}")

    print(f"base_url={cfg.base_url}")
    print(f"mandatory={cfg.mandatory_file}")
    print(f"optional files count={len(cfg.optional_files)}")
    for f in cfg.optional_files:
        print(f"  - {f}")
    print(f"retry attempts={cfg.retry_attempts} delay={cfg.retry_delay}s")

    engine = TemplateEngine(default_loader(cfg.templates_dir))
    compiled = engine.compile_all()
    print(f"templates compiled={sum(compiled.values())}/{len(compiled)} ready={engine.is_ready()}")


def cmd_validate(path: Path, kind: str) -> int:
    text = path.read_text(encoding="utf-8")
    parsed = parse_and_validate(text)
    if not parsed.success:
        print(f"[red]syntax error[/red]: {parsed.error}")
        return 2

    result = JSONValidator().validate(parsed.data, kind)
    print(f"file={path}")
    print(f"kind={kind}")
    print(f"valid={result.success}")
    for err in result.errors:
        print(f"  - {err}")
    return 0 if result.success else 1


def cmd_build(
    out: Path,
    *,
    data_dir: Optional[Path] = None,
    base_url: Optional[str] = None,
    passes: int = 1,
    json_logs: bool = False,
) -> int:
    cfg = load_config()
    configure_logging(cfg.log_level, json_output=json_logs)

    if base_url:
        cfg = replace(cfg, base_url=base_url)

    transport = DirectoryTransport(data_dir) if data_dir is not None else None
    if transport is not None:
        cfg = replace(cfg, base_url="http://local/")

    app, html = asyncio.run(run_pipeline(cfg, transport=transport, max_passes=passes))
    status = app.status()

    print(f"state={status['state']}")
    for key, result in app.validation.items():
        print(f"validation {key}: valid={result.success} errors={len(result.errors)}")

    if not html:
        print(f"[red]{status['error_message']}[/red]")
        return 1

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(html, encoding="utf-8")
    print(f"loaded={sorted(app.data)}")
    print(f"written: {out}")
    return 0
