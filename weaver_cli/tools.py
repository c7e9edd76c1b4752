"""Utility sub-commands: doctor and sleep."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import List

from weaver.fabric.constants import CA_SERVER_CONFIG, ORDERER_CONFIG, PEER_CONFIG, FabricBinary
from weaver.operations import OperationContext
from weaver_cli.common import print_status

TEMPLATES = (CA_SERVER_CONFIG, ORDERER_CONFIG, PEER_CONFIG)


@dataclass
class DoctorReport:
    found: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.missing


def diagnose(ctx: OperationContext) -> DoctorReport:
    """Check that every Fabric binary resolves and every template is present."""
    report = DoctorReport()
    resolver = ctx.supervisor.resolver
    for binary in FabricBinary:
        if resolver.is_available(binary.value):
            report.found.append(f"{binary.value}: {resolver.resolve(binary.value)}")
        else:
            report.missing.append(binary.value)
    if ctx.settings.bin_dir is None:
        report.warnings.append("FABRIC_BIN_FOLDER not set; binaries are looked up on PATH")
    for name in TEMPLATES:
        if not (ctx.settings.template_dir / name).exists():
            report.warnings.append(f"Template {name} not found in {ctx.settings.template_dir}")
    return report


async def cmd_doctor(args: argparse.Namespace, ctx: OperationContext) -> int:
    report = diagnose(ctx)
    for line in report.found:
        print_status("OK", line)
    for warning in report.warnings:
        print_status("WARN", warning)
    for binary in report.missing:
        print_status("ERROR", f"{binary}: not found")
    return 0 if report.passed or not args.strict else 1


async def cmd_sleep(args: argparse.Namespace, ctx: OperationContext) -> int:
    print_status("OK", f"Sleeping {args.time}s")
    if await ctx.cancel.sleep(args.time):
        print_status("WARN", "Sleep interrupted")
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    doctor = subparsers.add_parser("doctor", help="Check binaries and templates.")
    doctor.add_argument("--strict", action="store_true", help="Exit nonzero when a binary is missing.")
    doctor.set_defaults(func=cmd_doctor)

    sleep = subparsers.add_parser("sleep", help="Wait, e.g. between container start-up steps.")
    sleep.add_argument("--time", type=float, default=1.0, help="Seconds to sleep.")
    sleep.set_defaults(func=cmd_sleep)
