"""Orderer and channel artifact sub-commands: boot-orderer, osn-admin-join, configtxgen, configtxlator."""

from __future__ import annotations

import argparse

from weaver.fabric.constants import ConfigtxlatorCommand, ConfigtxlatorProtoMessage
from weaver.operations import (
    OperationContext,
    OrdererOptions,
    boot_orderer,
    create_genesis_block,
    osn_admin_join,
    run_configtxlator,
)
from weaver_cli.common import add_flag, csv_list, print_status, serve_until_exit


async def cmd_boot_orderer(args: argparse.Namespace, ctx: OperationContext) -> int:
    opts = OrdererOptions(
        listen_address=args.listen_address,
        port=args.port,
        msp_dir=args.msp_dir,
        msp_id=args.msp_id,
        bootstrap_method=args.bootstrap_method,
        channel_participation_enabled=args.channel_participation_enabled,
        tls_enabled=args.tls_enabled,
        tls_cert=args.tls_cert,
        tls_key=args.tls_key,
        tls_root_cas=args.tls_root_cas,
        admin_listen_address=args.admin_address,
        admin_tls_enabled=args.admin_tls_enabled,
        admin_tls_cert=args.admin_tls_cert,
        admin_tls_key=args.admin_tls_key,
        admin_tls_root_cas=args.admin_tls_root_cas,
        admin_tls_client_root_cas=args.admin_tls_client_root_cas,
        consensus_wal_dir=args.consensus_wal_dir,
        consensus_snap_dir=args.consensus_snap_dir,
        file_ledger_location=args.file_ledger_location,
        operations_address=args.operations_address,
    )
    result = await boot_orderer(ctx, args.config_path, opts)
    return await serve_until_exit(ctx, result, "orderer")


async def cmd_osn_admin_join(args: argparse.Namespace, ctx: OperationContext) -> int:
    await osn_admin_join(
        ctx,
        channel_id=args.channel_id,
        config_block=args.config_block,
        admin_address=args.admin_address,
        ca_file=args.tls_ca,
        client_cert=args.tls_cert,
        client_key=args.tls_key,
        no_status=args.no_status,
    )
    print_status("OK", f"Orderer joined channel {args.channel_id}")
    return 0


async def cmd_configtxgen(args: argparse.Namespace, ctx: OperationContext) -> int:
    await create_genesis_block(
        ctx,
        config_path=args.config_path,
        profile=args.profile,
        channel_id=args.channel_id,
        output_block=args.output_block,
        as_org=args.as_org,
        inspect_block=args.inspect_block,
    )
    print_status("OK", "configtxgen completed")
    return 0


async def cmd_configtxlator(args: argparse.Namespace, ctx: OperationContext) -> int:
    result = await run_configtxlator(
        ctx,
        args.translate_command,
        message_type=args.type,
        input_file=args.input,
        output_file=args.output,
        original=args.original,
        updated=args.updated,
        channel_id=args.channel_id,
        hostname=args.hostname,
        port=args.port,
        cors=args.cors,
    )
    if args.translate_command == ConfigtxlatorCommand.START.value:
        return await serve_until_exit(ctx, result, "configtxlator")
    print_status("OK", f"configtxlator {args.translate_command} completed")
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    boot = subparsers.add_parser("boot-orderer", help="Write orderer.yaml and start the orderer.")
    boot.add_argument("--config-path", default=".", help="Directory (or orderer.yaml path) for the config.")
    boot.add_argument("--listen-address")
    boot.add_argument("--port", type=int)
    boot.add_argument("--msp-dir")
    boot.add_argument("--msp-id")
    boot.add_argument("--bootstrap-method", choices=["none", "file"])
    add_flag(boot, "--channel-participation-enabled")
    add_flag(boot, "--tls-enabled")
    boot.add_argument("--tls-cert")
    boot.add_argument("--tls-key")
    boot.add_argument("--tls-root-cas", type=csv_list)
    boot.add_argument("--admin-address")
    add_flag(boot, "--admin-tls-enabled")
    boot.add_argument("--admin-tls-cert")
    boot.add_argument("--admin-tls-key")
    boot.add_argument("--admin-tls-root-cas", type=csv_list)
    boot.add_argument("--admin-tls-client-root-cas", type=csv_list)
    boot.add_argument("--consensus-wal-dir")
    boot.add_argument("--consensus-snap-dir")
    boot.add_argument("--file-ledger-location")
    boot.add_argument("--operations-address")
    boot.set_defaults(func=cmd_boot_orderer)

    join = subparsers.add_parser("osn-admin-join", help="Join an orderer to a channel with osnadmin.")
    join.add_argument("--channel-id", required=True)
    join.add_argument("--config-block", required=True)
    join.add_argument("--admin-address", required=True)
    join.add_argument("--tls-ca")
    join.add_argument("--tls-cert")
    join.add_argument("--tls-key")
    add_flag(join, "--no-status")
    join.set_defaults(func=cmd_osn_admin_join)

    gen = subparsers.add_parser("configtxgen", help="Run configtxgen (genesis block by default).")
    gen.add_argument("--config-path", help="Directory holding configtx.yaml.")
    gen.add_argument("--profile")
    gen.add_argument("--channel-id")
    gen.add_argument("--output-block")
    gen.add_argument("--as-org")
    gen.add_argument("--inspect-block")
    gen.set_defaults(func=cmd_configtxgen)

    lator = subparsers.add_parser("configtxlator", help="Translate or diff config artifacts with configtxlator.")
    lator.add_argument(
        "--command", dest="translate_command", required=True, choices=[c.value for c in ConfigtxlatorCommand],
    )
    lator.add_argument("--type", choices=[m.value for m in ConfigtxlatorProtoMessage], help="Protobuf message type.")
    lator.add_argument("--input")
    lator.add_argument("--output")
    lator.add_argument("--original")
    lator.add_argument("--updated")
    lator.add_argument("--channel-id")
    lator.add_argument("--hostname")
    lator.add_argument("--port", type=int)
    lator.add_argument("--cors", type=csv_list)
    lator.set_defaults(func=cmd_configtxlator)
