"""Chaincode sub-commands: package, install, approve and commit."""

from __future__ import annotations

import argparse

from weaver.operations import (
    ChaincodeDefinition,
    OperationContext,
    approve_chaincode,
    commit_chaincode,
    install_chaincode,
    package_chaincode,
)
from weaver_cli.common import add_flag, csv_list, print_status


def _definition(args: argparse.Namespace) -> ChaincodeDefinition:
    return ChaincodeDefinition(
        channel_id=args.channel_id,
        name=args.chaincode_name,
        version=args.chaincode_version,
        sequence=args.sequence,
        orderer_address=args.orderer_address,
        tls_enabled=args.enable_tls,
        tls_ca_file=args.tls_ca_cert_file,
        collections_config=args.collection_config,
        orderer_tls_hostname_override=args.orderer_tls_hostname_override,
        init_required=args.init_required,
        signature_policy=args.signature_policy,
        config_path=args.config_path,
    )


async def cmd_package(args: argparse.Namespace, ctx: OperationContext) -> int:
    await package_chaincode(
        ctx,
        args.chaincode_output,
        contract_path=args.chaincode_path,
        lang=args.lang,
        name=args.chaincode_name,
        version=args.chaincode_version,
        config_path=args.config_path,
    )
    print_status("OK", f"Chaincode packaged to {args.chaincode_output}")
    return 0


async def cmd_install(args: argparse.Namespace, ctx: OperationContext) -> int:
    await install_chaincode(ctx, args.chaincode_path, config_path=args.config_path)
    print_status("OK", f"Installed {args.chaincode_path}")
    return 0


async def cmd_approve(args: argparse.Namespace, ctx: OperationContext) -> int:
    await approve_chaincode(ctx, _definition(args), package_id=args.package_id)
    print_status("OK", f"Approved {args.chaincode_name} {args.chaincode_version}")
    return 0


async def cmd_commit(args: argparse.Namespace, ctx: OperationContext) -> int:
    await commit_chaincode(
        ctx,
        _definition(args),
        peer_addresses=args.peer_addresses,
        peer_tls_roots=args.peer_tls_roots,
        interval=args.interval,
    )
    print_status("OK", f"Committed {args.chaincode_name} {args.chaincode_version}")
    return 0


def _add_definition_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config-path", help="Directory holding the peer's core.yaml.")
    parser.add_argument("--orderer-address", required=True)
    parser.add_argument("--channel-id", required=True)
    parser.add_argument("--chaincode-name", required=True)
    parser.add_argument("--chaincode-version", required=True)
    parser.add_argument("--sequence", type=int, required=True)
    add_flag(parser, "--enable-tls")
    parser.add_argument("--tls-ca-cert-file")
    parser.add_argument("--collection-config")
    parser.add_argument("--orderer-tls-hostname-override")
    add_flag(parser, "--init-required")
    parser.add_argument("--signature-policy")


def register(subparsers: argparse._SubParsersAction) -> None:
    package = subparsers.add_parser("package-chaincode", help="Package chaincode as <name>_<version>.")
    package.add_argument("--config-path", help="Directory holding the peer's core.yaml.")
    package.add_argument("--chaincode-path", required=True)
    package.add_argument("--lang", default="node")
    package.add_argument("--chaincode-output", required=True)
    package.add_argument("--chaincode-name", required=True)
    package.add_argument("--chaincode-version", required=True)
    package.set_defaults(func=cmd_package)

    install = subparsers.add_parser("install-chaincode", help="Install a chaincode package on the peer.")
    install.add_argument("--config-path", help="Directory holding the peer's core.yaml.")
    install.add_argument("--chaincode-path", required=True, help="Package file to install.")
    install.set_defaults(func=cmd_install)

    approve = subparsers.add_parser("approve-chaincode", help="Approve a chaincode definition for this org.")
    _add_definition_arguments(approve)
    approve.add_argument("--package-id", help="Skip the queryinstalled lookup.")
    approve.set_defaults(func=cmd_approve)

    commit = subparsers.add_parser("commit-chaincode", help="Commit once a majority of orgs approved.")
    _add_definition_arguments(commit)
    commit.add_argument("--peer-addresses", type=csv_list)
    commit.add_argument("--peer-tls-roots", type=csv_list)
    commit.add_argument("--interval", type=float, help="Seconds between readiness checks.")
    commit.set_defaults(func=cmd_commit)
