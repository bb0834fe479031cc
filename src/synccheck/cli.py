"""Command-line entrypoint: build snapshots and compare them."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from synccheck.config import CliOverrides, SyncCheckConfig, load_effective_config
from synccheck.index import (
    Db,
    DbDiffs,
    DuplicateChunkError,
    MismatchedChunksError,
    SkippedPath,
    SnapshotDecodeError,
    read_db,
    scan,
    write_db,
    write_db_stream,
)
from synccheck.logging import AuditEvent, JsonlAuditLogger, sanitize_arguments, utc_timestamp

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_OUT_OF_SYNC = 3


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the index and diff commands."""
    parser = argparse.ArgumentParser(
        prog="synccheck",
        description="Snapshot directory trees and compare them by path tail and size.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    index_parser = subparsers.add_parser("index", help="Write a snapshot of a directory tree.")
    index_parser.add_argument("path")
    index_parser.add_argument("-o", "--output-file", required=False, default=None)
    index_parser.add_argument(
        "-x", "--exclude", action="append", default=[], help="Exact file name to skip."
    )
    index_parser.add_argument("--depth", type=int, required=False, default=None)
    index_parser.add_argument("-v", "--verbose", action="store_true")
    _add_common_arguments(index_parser)

    diff_parser = subparsers.add_parser("diff", help="Compare two snapshots.")
    diff_parser.add_argument("--from", dest="from_path", required=True)
    diff_parser.add_argument("--to", dest="to_path", required=True)
    diff_parser.add_argument("--show-added", action="store_true")
    diff_parser.add_argument("--check", action="store_true")
    _add_common_arguments(diff_parser)
    return parser


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", required=False, default=None)
    parser.add_argument("--audit-log", required=False, default=None)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the synccheck command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    overrides = CliOverrides(
        depth=getattr(args, "depth", None),
        exclude=tuple(getattr(args, "exclude", ())),
        audit_log=Path(args.audit_log) if args.audit_log is not None else None,
    )
    try:
        config = load_effective_config(
            config_path=Path(args.config) if args.config is not None else None,
            overrides=overrides,
        )
    except (OSError, ValueError) as error:
        print(f"error: invalid configuration: {error}", file=sys.stderr)
        return EXIT_USAGE

    try:
        audit_logger = (
            JsonlAuditLogger(path=config.audit.log_path)
            if config.audit.log_path is not None
            else None
        )
    except OSError as error:
        print(f"error: cannot open audit log: {error}", file=sys.stderr)
        return EXIT_USAGE
    arguments = {key: value for key, value in vars(args).items() if key != "command"}
    try:
        if args.command == "index":
            exit_code, counters = run_index(args, config)
        else:
            exit_code, counters = run_diff(args)
    except DuplicateChunkError as error:
        message = f"duplicate chunk for {error.path}"
        return _fail(audit_logger, args.command, arguments, "DUPLICATE_CHUNK", message)
    except MismatchedChunksError as error:
        return _fail(audit_logger, args.command, arguments, "MISMATCHED_CHUNKS", str(error))
    except SnapshotDecodeError as error:
        message = f"malformed snapshot: {error.reason}"
        return _fail(audit_logger, args.command, arguments, "SNAPSHOT_DECODE", message)
    except OSError as error:
        return _fail(audit_logger, args.command, arguments, "IO_ERROR", str(error))

    event = AuditEvent(
        timestamp=utc_timestamp(),
        command=args.command,
        ok=True,
        error_code=None,
        metadata=sanitize_arguments({**arguments, **counters}),
    )
    if not _record(audit_logger, event):
        return EXIT_ERROR
    return exit_code


def run_index(args: argparse.Namespace, config: SyncCheckConfig) -> tuple[int, dict[str, object]]:
    """Build a snapshot of args.path and write it to a file or stdout."""
    root = Path(args.path)
    root.stat()
    walker_config = config.walker_config()
    db = Db(depth=walker_config.depth)
    skipped = 0
    for item in scan(root, walker_config):
        if isinstance(item, SkippedPath):
            skipped += 1
            if args.verbose:
                print(f"warning: skipped {item.path} ({item.reason})", file=sys.stderr)
            continue
        db.insert(item)

    if args.output_file is None:
        write_db_stream(db, sys.stdout)
    else:
        write_db(db, Path(args.output_file))
    counters: dict[str, object] = {
        "depth": db.depth,
        "entry_count": len(db),
        "skipped_count": skipped,
    }
    return EXIT_OK, counters


def run_diff(args: argparse.Namespace) -> tuple[int, dict[str, object]]:
    """Compare the --to snapshot against the --from reference and print results."""
    reference = read_db(Path(args.from_path))
    current = read_db(Path(args.to_path))
    diffs = current.diffs_from(reference, include_added=args.show_added)
    sys.stdout.write(render_diffs(diffs, show_added=args.show_added))

    out_of_sync = diffs.out_of_sync()
    counters: dict[str, object] = {
        "missing_count": len(diffs.missing),
        "mismatched_size_count": len(diffs.mismatched_size),
        "added_count": len(diffs.added),
        "out_of_sync": out_of_sync,
    }
    if args.check and out_of_sync:
        return EXIT_OUT_OF_SYNC, counters
    return EXIT_OK, counters


def render_diffs(diffs: DbDiffs, show_added: bool = False) -> str:
    """Render diff results as the labeled plain-text report."""
    lines = ["Results", "======="]
    lines.extend(_section("Missing:", diffs.missing_paths()))
    lines.extend(_section("Mismatched Size:", diffs.mismatched_size_paths()))
    if show_added:
        lines.extend(_section("Added:", [entry.relative_path for entry in diffs.added]))
    return "\n".join(lines) + "\n"


def _section(title: str, paths: list[str]) -> list[str]:
    return [title, "-" * len(title), *(f"  {path}" for path in paths)]


def _fail(
    audit_logger: JsonlAuditLogger | None,
    command: str,
    arguments: dict[str, object],
    error_code: str,
    message: str,
) -> int:
    print(f"error: {message}", file=sys.stderr)
    _record(
        audit_logger,
        AuditEvent(
            timestamp=utc_timestamp(),
            command=command,
            ok=False,
            error_code=error_code,
            metadata=sanitize_arguments(arguments),
        ),
    )
    return EXIT_ERROR


def _record(audit_logger: JsonlAuditLogger | None, event: AuditEvent) -> bool:
    """Append event when auditing is enabled; False when the log cannot be written."""
    if audit_logger is None:
        return True
    try:
        audit_logger.append(event)
    except OSError as error:
        print(f"error: cannot write audit log: {error}", file=sys.stderr)
        return False
    return True


if __name__ == "__main__":
    raise SystemExit(main())
