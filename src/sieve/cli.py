# SPDX-License-Identifier: MIT
"""
Sieve - Command Line Interface

This CLI provides:
- sieve version
- sieve scan --staged | --path <path> | --since <ref>
- sieve baseline --generate | --check [--path <path>]
- sieve check [--full] [--repair [--dry-run]] [--fix N]
- sieve init-config

Running ``sieve`` with no arguments is the same as ``sieve check --full``.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from . import __version__
from .core.exceptions import SieveConfigError, SieveGitError
from .core.findings import Finding, Severity

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2


def _common_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--format",
        choices=["text", "json", "sarif"],
        default="text",
        help="output format (default: text)"
    )
    common.add_argument(
        "--strict",
        action="store_true",
        help="fail on Medium severity findings too"
    )
    common.add_argument(
        "--verbose",
        action="store_true",
        help="show why each finding was flagged and debug logging"
    )
    common.add_argument(
        "--config",
        help="path to a .sieve.yml config file"
    )
    return common


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="sieve", description="Secret Leak Tripwire")
    p.add_argument("-v", "--version", action="store_true", help="print version and exit")

    common = _common_options()
    sub = p.add_subparsers(dest="cmd")
    sub.add_parser("version", help="print version")

    sp = sub.add_parser("scan", parents=[common], help="scan for secrets")
    source = sp.add_mutually_exclusive_group()
    source.add_argument("--staged", action="store_true", help="scan staged changes (git diff --cached)")
    source.add_argument("--path", help="scan a specific path recursively")
    source.add_argument("--since", help="scan changes since a git reference")

    bp = sub.add_parser("baseline", parents=[common], help="manage the baseline of known secrets")
    mode = bp.add_mutually_exclusive_group()
    mode.add_argument("--generate", action="store_true", help="add current findings to the baseline")
    mode.add_argument("--check", action="store_true", help="report only findings missing from the baseline")
    bp.add_argument("--path", help="scan this path instead of the staged changes")

    cp = sub.add_parser("check", parents=[common], help="check for secrets with repair options")
    cp.add_argument("--full", action="store_true", help="full recursive scan of the working tree")
    cp.add_argument("--repair", action="store_true", help="replace every finding with a placeholder")
    cp.add_argument("--fix", type=int, metavar="N", help="fix cached finding number N")
    cp.add_argument("--dry-run", action="store_true", help="with --repair, list the planned edits without writing")

    ip = sub.add_parser("init-config", help="write a default .sieve.yml")
    ip.add_argument("path", nargs="?", default=".sieve.yml", help="where to write the config")
    ip.add_argument("--force", action="store_true", help="overwrite an existing file")

    return p


def main(argv=None):
    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv:
        argv = ["check", "--full"]

    p = build_parser()
    args = p.parse_args(argv)

    if args.version or args.cmd == "version":
        print(__version__)
        return EXIT_OK

    _setup_logging(getattr(args, "verbose", False))

    try:
        if args.cmd == "scan":
            return handle_scan_command(args)
        if args.cmd == "baseline":
            return handle_baseline_command(args)
        if args.cmd == "check":
            return handle_check_command(args)
        if args.cmd == "init-config":
            return handle_init_config_command(args)
    except SieveConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except SieveGitError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    p.print_help()
    return EXIT_OK


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[sieve] %(levelname)s %(name)s: %(message)s",
    )


def _load_config(args, root: str = "."):
    from .scanner.config import load_scanner_config

    return load_scanner_config(args.config, repo_root=root)


def handle_scan_command(args):
    """Handle the scan subcommand."""
    from .baseline.store import Baseline
    from .git.ops import check_git_installed, get_since_diff, get_staged_diff
    from .scanner.direct import scan_diff, scan_tree

    root = args.path or "."
    config = _load_config(args, root)
    baseline = Baseline.load(config["baseline_path"])

    if args.staged:
        check_git_installed()
        findings = scan_diff(get_staged_diff(), baseline)
    elif args.since:
        findings = scan_diff(get_since_diff(args.since), baseline)
    elif args.path:
        if not Path(args.path).exists():
            print(f"Error: path not found: {args.path}", file=sys.stderr)
            return EXIT_USAGE
        findings = scan_tree(args.path, config, baseline)
    else:
        print("Please specify --staged, --path <path>, or --since <ref>", file=sys.stderr)
        return EXIT_USAGE

    return report_findings(findings, args)


def handle_baseline_command(args):
    """Handle the baseline subcommand."""
    from .baseline.store import Baseline
    from .git.ops import get_staged_diff
    from .scanner.direct import scan_diff, scan_tree

    if not (args.generate or args.check):
        print("Please specify --generate or --check", file=sys.stderr)
        return EXIT_USAGE

    config = _load_config(args, args.path or ".")
    baseline = Baseline.load(config["baseline_path"])

    if args.path:
        findings = scan_tree(args.path, config)
    else:
        findings = scan_diff(get_staged_diff())

    if args.generate:
        added = sum(1 for f in findings if baseline.add_finding(f))
        baseline.save()
        print(f"Baseline generated/updated at {baseline.path} ({added} new, {len(baseline)} total)")
        return EXIT_OK

    return report_findings([f for f in findings if not baseline.contains(f.fingerprint)], args)


def handle_check_command(args):
    """Handle the check subcommand."""
    from .autofix.planner import format_plan_for_display, plan_replacements, repair_findings
    from .baseline.cache import save_cache
    from .baseline.store import Baseline
    from .git.ops import get_staged_diff
    from .scanner.direct import scan_diff, scan_tree

    config = _load_config(args)
    cache_path = config["cache_path"]

    if args.fix is not None:
        return _fix_cached_finding(args.fix, cache_path, config["placeholder"])

    baseline = Baseline.load(config["baseline_path"])
    if args.full:
        # Dotfiles such as .env are exactly where secrets hide
        findings = scan_tree(".", dict(config, include_hidden=True), baseline)
    else:
        if args.format == "text":
            print("Running quick check (staged files)... use --full for full scan.")
        try:
            findings = scan_diff(get_staged_diff(), baseline)
        except SieveGitError as e:
            logging.getLogger(__name__).warning("Staged diff unavailable: %s", e)
            findings = []

    try:
        save_cache(findings, cache_path)
    except OSError as e:
        logging.getLogger(__name__).warning("Could not write findings cache %s: %s", cache_path, e)

    if args.repair and args.dry_run:
        print(format_plan_for_display(plan_replacements(findings, config["placeholder"])))
        return _exit_code(findings, args.strict)

    if args.repair:
        print(f"Repairing {len(findings)} findings...")
        failed = 0
        for fix in repair_findings(findings, config["placeholder"]):
            if fix.result.success:
                print(f"Fixed {fix.path}")
            else:
                failed += 1
                print(f"Failed to fix {fix.path}: {fix.result.message}", file=sys.stderr)
        return EXIT_FINDINGS if failed else EXIT_OK

    return report_findings(findings, args)


def _fix_cached_finding(index: int, cache_path: str, placeholder: str) -> int:
    from .autofix.apply import fix_file
    from .autofix.planner import plan_replacements
    from .baseline.cache import load_cache

    try:
        cached = load_cache(cache_path)
    except FileNotFoundError:
        print("Error: Cache file not found. Run 'sieve check --full' first.", file=sys.stderr)
        return EXIT_FINDINGS
    except ValueError as e:
        print(f"Error: unreadable cache {cache_path}: {e}", file=sys.stderr)
        return EXIT_FINDINGS

    if index < 0 or index >= len(cached):
        print(f"Error: Index {index} out of bounds ({len(cached)} findings)", file=sys.stderr)
        return EXIT_FINDINGS

    finding = cached[index]
    print(f"Fixing finding #{index} in {finding.file_path}:{finding.line_number}")
    stale = f"Error: nothing applied to {finding.file_path} (stale cache? run 'sieve check --full' again)"
    replacements = plan_replacements([finding], placeholder).get(finding.file_path, [])
    if not replacements and Path(finding.file_path).is_file():
        # The cached line no longer exists
        print(stale, file=sys.stderr)
        return EXIT_FINDINGS
    result = fix_file(finding.file_path, replacements)
    if not result.success:
        print(f"Error fixing file: {result.message}", file=sys.stderr)
        return EXIT_FINDINGS
    if result.applied == 0:
        print(stale, file=sys.stderr)
        return EXIT_FINDINGS
    print(result.message)
    return EXIT_OK


def handle_init_config_command(args):
    from .scanner.config import create_default_config_template

    target = Path(args.path)
    if target.exists() and not args.force:
        print(f"Error: {target} already exists (use --force to overwrite)", file=sys.stderr)
        return EXIT_USAGE
    target.write_text(create_default_config_template(), encoding="utf-8")
    print(f"Wrote {target}")
    return EXIT_OK


def report_findings(findings: List[Finding], args) -> int:
    """Print findings in the requested format and return the exit code."""
    from .scanner.direct import sort_findings

    findings = sort_findings(findings)

    if args.format == "json":
        print(json.dumps([f.to_dict() for f in findings], indent=2))
    elif args.format == "sarif":
        from .sarif.export import build_sarif

        print(json.dumps(build_sarif(findings), indent=2))
    else:
        print_text_summary(findings, verbose=args.verbose)

    return _exit_code(findings, args.strict)


def _exit_code(findings: List[Finding], strict: bool) -> int:
    fail = any(f.severity == Severity.HIGH for f in findings) or (strict and bool(findings))
    return EXIT_FINDINGS if fail else EXIT_OK


def print_text_summary(findings: List[Finding], verbose: bool = False) -> None:
    """Print a text summary of findings."""
    if not findings:
        print("Sieve: No secrets found.")
        return

    for f in findings:
        print(f"[{f.severity.label}] {f.file_path}:{f.line_number} - {f.rule_id} ({f.redacted_preview})")
        if verbose:
            print(f"    Why: {', '.join(f.reason)}")

    high = sum(1 for f in findings if f.severity == Severity.HIGH)
    print(f"\nTotal findings: {len(findings)} ({high} high)")


if __name__ == "__main__":
    raise SystemExit(main())
