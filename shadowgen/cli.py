"""CLI entrypoints for shadowgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .canary import TestClassCanary, format_match
from .config import ConfigError, ShadowConfig, load_config
from .logging import configure_logging
from .models import FileStatus
from .orchestrator import Orchestrator
from .scanner import discover_files


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    _add_verbose_option(parser, suppress_default=True)
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to scan (defaults to current directory).",
    )
    parser.add_argument(
        "--config",
        help="Path to a .shadowgen.yml file (defaults to <path>/.shadowgen.yml).",
    )


def _optional_flag(parser: argparse.ArgumentParser, name: str, help_text: str) -> None:
    parser.add_argument(name, action="store_true", default=None, help=help_text)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shadowgen",
        description="Generate shadow classes exposing fileprivate members for testing.",
    )
    _add_verbose_option(parser)
    parser.add_argument("--log-file", help="Also write logs to this file.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate shadow classes for files carrying the opt-in marker.",
    )
    _add_common_options(generate_parser)
    _optional_flag(
        generate_parser,
        "--append",
        "Append shadow classes to the source files themselves (destructive).",
    )
    generate_parser.add_argument(
        "--no-files",
        action="store_true",
        help="Do not write shadow files into the generated directory.",
    )
    _optional_flag(
        generate_parser,
        "--dump-structure",
        "Write the raw indexer output next to the shadow files.",
    )
    _optional_flag(
        generate_parser,
        "--strict",
        "Fail a file when one of its members cannot be classified.",
    )
    generate_parser.add_argument(
        "--jobs",
        type=int,
        default=None,
        help="Number of files to process in parallel.",
    )
    generate_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for the indexer per file.",
    )
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print rendered shadow classes instead of writing them.",
    )
    generate_parser.add_argument(
        "--fail-on-error",
        action="store_true",
        help="Exit with status 1 when any file fails to generate.",
    )

    canary_parser = subparsers.add_parser(
        "canary",
        help="Report test classes declared outside the testing conditional region.",
    )
    _add_common_options(canary_parser)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for shadowgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    try:
        config = _load(args)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "generate":
        return _run_generate(parser, args, config)
    if args.command == "canary":
        return _run_canary(parser, config)
    parser.exit(1, "Unknown command\n")  # pragma: no cover - argparse enforces choices
    return 1


def _load(args: argparse.Namespace) -> ShadowConfig:
    scan_root = Path(args.path).expanduser().resolve()
    config = load_config(Path(args.config) if args.config else scan_root)
    # The scan root always follows the positional path, even with an external config file.
    config.root = scan_root
    return config


def _run_generate(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: ShadowConfig
) -> int:
    config = config.with_overrides(
        append_to_source=args.append,
        write_files=False if args.no_files else None,
        dump_structure=args.dump_structure,
        strict=args.strict,
        jobs=args.jobs,
        timeout=args.timeout,
    )
    try:
        summary = Orchestrator(config).run(dry_run=bool(args.dry_run))
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")

    for report in summary.processed:
        rel_path = _relativize(report.path, config.root)
        if report.status is FileStatus.DRY_RUN:
            print(f"// {rel_path}")
            print(report.rendered or "", end="")
        elif report.status is FileStatus.GENERATED:
            targets = ", ".join(_relativize(path, config.root) for path in report.outputs)
            print(f"{rel_path} -> {targets or '(nothing written)'}")
        else:
            print(f"{rel_path}: FAILED [{report.error_code.value if report.error_code else 'error'}] {report.error}")
        for warning in report.warnings:
            print(f"  warning: {warning}")

    if not summary.processed:
        print(
            f"NO FILES MARKED WITH {config.markers.opt_in.strip()} "
            f"IN FIRST {config.markers.lines} LINE(S)"
        )
    print(f"Finished in {summary.elapsed:.3f} seconds")

    if args.fail_on_error and summary.failed:
        return 1
    return 0


def _run_canary(parser: argparse.ArgumentParser, config: ShadowConfig) -> int:
    try:
        files = discover_files(
            config.root,
            extensions=config.scan.extensions,
            ignore_paths=config.scan.ignore_paths,
        )
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")

    canary = TestClassCanary(config.canary.macro, config.generation.class_prefix)
    matches = canary.scan_files(files)
    for match in matches:
        print(format_match(match, config.root))
    return 1 if matches else 0


def _relativize(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
