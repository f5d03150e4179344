from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .commands import cmd_build, cmd_ping, cmd_validate
from .validator import DocumentKind


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="internet_timeline")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("ping", help="Sanity check: configs + template compilation")

    v = sub.add_parser("validate", help="Parse + structurally validate a local JSON document")
    v.add_argument("path")
    v.add_argument("--kind", default=DocumentKind.HISTORICAL_EVENTS.value, choices=[k.value for k in DocumentKind])

    b = sub.add_parser("build", help="Run the full pipeline and write the rendered page")
    b.add_argument("--out", default="build/index.html")
    b.add_argument("--data_dir", required=False, default=None, help="Directory that contains data/*.json")
    b.add_argument("--base_url", required=False, default=None)
    b.add_argument("--passes", type=int, default=1, help="Replay a failed pass up to this many times")
    b.add_argument("--json_logs", action="store_true")

    return p


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "ping":
        cmd_ping()
        return

    if args.command == "validate":
        sys.exit(cmd_validate(Path(args.path).expanduser().resolve(), args.kind))

    if args.command == "build":
        data_dir = Path(args.data_dir).expanduser().resolve() if args.data_dir else None
        sys.exit(
            cmd_build(
                Path(args.out),
                data_dir=data_dir,
                base_url=args.base_url,
                passes=max(1, args.passes),
                json_logs=args.json_logs,
            )
        )

    parser.error(f"Unknown command: {args.command}")


if __name__ == "__main__":
    main()
