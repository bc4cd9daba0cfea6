#!/usr/bin/env python3
"""
=============================================================================
CROSSBUILD - UNIFIED COMMANDER
=============================================================================
The single entry point for building and running 2D apps on every target.

Usage:
    crossbuild build --native app.rb     # Native executable at build/app
    crossbuild build --web app.rb        # build/app.js + build/app.html
    crossbuild build --ios app.rb        # Xcode project + simulator app
    crossbuild build --all app.rb        # Every target, failures isolated
    crossbuild build --clean             # Remove every build artifact
    crossbuild launch --native           # Run a previous build
    crossbuild simulator --list          # Simulator device management
    crossbuild doctor                    # Toolchain / installation check
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from crossbuild import __version__
from crossbuild.core.domain.exceptions import DomainError, ExternalToolFailureError
from crossbuild.core.domain.models import BuildOutcome, BuildRequest, Target
from crossbuild.shared.container import container
from crossbuild.shared.logging_config import configure_logging
from crossbuild.shared.observability import setup_observability

TARGET_FLAGS = [t.value for t in Target]

# Colors for terminal output
class Colors:
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'

def log(msg, color=Colors.ENDC, stream=None):
    print(f"{color}{msg}{Colors.ENDC}", file=stream or sys.stdout)

def report_error(error: DomainError):
    log(f"❌ Error: {error.message}", Colors.FAIL, stream=sys.stderr)
    if isinstance(error, ExternalToolFailureError) and error.stderr.strip():
        print(error.stderr.rstrip(), file=sys.stderr)

def relay(output: str):
    if output:
        print(output, end="" if output.endswith("\n") else "\n")

# --- COMMANDS ---

def report_outcome(outcome: BuildOutcome):
    target = outcome.target
    if target == Target.NATIVE:
        log(f"✅ Native app created at `{outcome.artifact}`", Colors.GREEN)
    elif target == Target.WEB:
        log(f"✅ Web app created at `{outcome.artifact}`", Colors.GREEN)
        log(f"   Run by opening `{outcome.artifact.with_suffix('.html')}`")
    else:
        log(f"✅ {target.value} app created at `{outcome.artifact}`", Colors.GREEN)

def build_command(args) -> int:
    use_case = container.build_app_use_case()

    if args.target == "clean":
        log("\n🧹 Cleaning Artifacts...", Colors.WARNING)
        removed = use_case.clean()
        for path in removed:
            log(f"   🗑️  Deleted: {path}")
        log("   ✅ Clean complete.", Colors.GREEN)
        return 0

    source = Path(args.file)

    if args.target == "all":
        outcomes = use_case.execute_all(source, debug=args.debug)
        log("\n=== BUILD SUMMARY ===", Colors.HEADER)
        for outcome in outcomes:
            if outcome.ok:
                log(f"  [OK]   {outcome.target.value:<7} {outcome.artifact} ({outcome.duration:.2f}s)", Colors.GREEN)
            else:
                step = outcome.failed_step.value if outcome.failed_step else "?"
                log(f"  [FAIL] {outcome.target.value:<7} {step}: {outcome.error}", Colors.FAIL)
        return 0 if all(o.ok for o in outcomes) else 1

    request = BuildRequest(target=Target(args.target), source_path=source, debug=args.debug)
    report_outcome(use_case.execute(request))
    return 0

def launch_command(args) -> int:
    result = container.launch_app_use_case().execute(Target(args.target))
    relay(result.stdout)
    return 0

def simulator_command(args) -> int:
    sim = container.simulator_use_case()
    if args.list:
        result = sim.list_devices()
    elif args.booted:
        result = sim.booted()
    elif args.open:
        result = sim.open(args.open)
    elif args.install:
        result = sim.install(args.install)
    elif args.launch:
        result = sim.launch(args.launch)
    else:
        result = sim.log(errors_only=args.log_errors)
    relay(result.stdout)
    return 0

def doctor_command(args) -> int:
    log("\n🩺 Running Doctor...", Colors.HEADER)
    use_case = container.doctor_use_case()
    checks = use_case.execute()
    for check in checks:
        if check.ok:
            log(f"   ✅ {check.name} {check.detail}", Colors.GREEN)
        elif check.required:
            log(f"   ❌ {check.name} {check.detail}", Colors.FAIL)
        else:
            log(f"   ⚠️  {check.name} not found ({check.detail})", Colors.WARNING)

    if use_case.healthy(checks):
        log("   ✅ Doctor complete.", Colors.GREEN)
        return 0
    log("   ❌ Doctor found problems.", Colors.FAIL)
    return 1

# --- MAIN ---

def _add_target_flags(group, extra=()):
    for name in TARGET_FLAGS + list(extra):
        group.add_argument(f"--{name}", dest="target", action="store_const", const=name)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crossbuild", description="Multi-target 2D app builder")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Build
    build = subparsers.add_parser("build", help="Build a source file for a target")
    group = build.add_mutually_exclusive_group(required=True)
    _add_target_flags(group, extra=("all", "clean"))
    build.add_argument("file", nargs="?", help="Application source file")
    build.add_argument("--debug", action="store_true", help="Keep intermediate files, add debug symbols")

    # Launch
    launch = subparsers.add_parser("launch", help="Run a previously built app")
    _add_target_flags(launch.add_mutually_exclusive_group(required=True))

    # Simulator
    sim = subparsers.add_parser("simulator", help="Manage iOS/tvOS simulators")
    sim_group = sim.add_mutually_exclusive_group(required=True)
    sim_group.add_argument("--list", action="store_true", help="List available devices")
    sim_group.add_argument("--booted", action="store_true", help="Show booted devices")
    sim_group.add_argument("--open", metavar="NAME", help="Open a device by name")
    sim_group.add_argument("--install", metavar="PATH", help="Install an app bundle")
    sim_group.add_argument("--launch", metavar="BUNDLE_ID", help="Launch an installed app")
    sim_group.add_argument("--log", action="store_true", help="Stream device logs")
    sim_group.add_argument("--log-errors", action="store_true", help="Stream device error logs")

    # Doctor
    subparsers.add_parser("doctor", help="Check toolchains and library installation")

    return parser

COMMANDS = {
    "build": build_command,
    "launch": launch_command,
    "simulator": simulator_command,
    "doctor": doctor_command,
}

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Default to help
    if not args.command:
        parser.print_help()
        return 0

    if args.command == "build" and args.target != "clean" and not args.file:
        parser.error("build needs a source file")

    configure_logging()
    setup_observability()

    try:
        return COMMANDS[args.command](args)
    except DomainError as e:
        report_error(e)
        return 1

def run():
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        log("\n🛑 Aborted by user.", Colors.WARNING)
        sys.exit(130)

if __name__ == "__main__":
    run()
