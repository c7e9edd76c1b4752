"""Peer sub-commands: boot-peer, peer-fetch-genesis-block, peer-join-channel."""

from __future__ import annotations

import argparse

from weaver.operations import (
    OperationContext,
    PeerOptions,
    boot_peer,
    peer_fetch_genesis_block,
    peer_join_channel,
)
from weaver_cli.common import add_flag, csv_list, print_status, serve_until_exit


async def cmd_boot_peer(args: argparse.Namespace, ctx: OperationContext) -> int:
    opts = PeerOptions(
        peer_id=args.peer_id,
        network_id=args.network_id,
        listen_address=args.listen_address,
        address=args.address,
        chaincode_listen_address=args.chaincode_listen_address,
        file_system_path=args.file_system_path,
        msp_id=args.local_msp_id,
        msp_dir=args.msp_config_path,
        gossip_bootstrap=args.gossip_bootstrap,
        gossip_external_endpoint=args.gossip_external_endpoint,
        tls_enabled=args.tls_enabled,
        tls_client_auth_required=args.tls_client_auth_required,
        tls_cert=args.tls_cert,
        tls_key=args.tls_key,
        tls_root_cert=args.tls_root_cert,
        tls_client_root_cas=args.tls_client_root_cas,
        vm_network_mode=args.vm_network_mode,
        state_database=args.state_database,
        couchdb_address=args.couchdb_address,
        couchdb_username=args.couchdb_username,
        couchdb_password=args.couchdb_password,
        snapshots_root_dir=args.snapshot_root_dir,
        operations_address=args.operations_address,
    )
    result = await boot_peer(ctx, args.config_path, opts)
    return await serve_until_exit(ctx, result, "peer")


async def cmd_fetch_genesis_block(args: argparse.Namespace, ctx: OperationContext) -> int:
    await peer_fetch_genesis_block(
        ctx,
        channel_id=args.channel_id,
        orderer_address=args.orderer_address,
        block_number=args.block_number,
        output_file=args.output_file,
        tls_enabled=args.tls,
        tls_ca_cert_file=args.tls_ca_cert_file,
        config_path=args.config_path,
    )
    print_status("OK", f"Block {args.block_number} written to {args.output_file}")
    return 0


async def cmd_join_channel(args: argparse.Namespace, ctx: OperationContext) -> int:
    await peer_join_channel(ctx, block_path=args.blockpath, config_path=args.config_path)
    print_status("OK", f"Peer joined channel from {args.blockpath}")
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    boot = subparsers.add_parser("boot-peer", help="Write core.yaml if missing and start the peer.")
    boot.add_argument("--config-path", default=".", help="Directory (or core.yaml path) for the config.")
    boot.add_argument("--peer-id")
    boot.add_argument("--network-id")
    boot.add_argument("--listen-address")
    boot.add_argument("--address")
    boot.add_argument("--chaincode-listen-address")
    boot.add_argument("--file-system-path")
    boot.add_argument("--local-msp-id")
    boot.add_argument("--msp-config-path")
    boot.add_argument("--gossip-bootstrap")
    boot.add_argument("--gossip-external-endpoint")
    add_flag(boot, "--tls-enabled")
    add_flag(boot, "--tls-client-auth-required")
    boot.add_argument("--tls-cert")
    boot.add_argument("--tls-key")
    boot.add_argument("--tls-root-cert")
    boot.add_argument("--tls-client-root-cas", type=csv_list)
    boot.add_argument("--vm-network-mode")
    boot.add_argument("--state-database", choices=["goleveldb", "CouchDB"])
    boot.add_argument("--couchdb-address")
    boot.add_argument("--couchdb-username")
    boot.add_argument("--couchdb-password")
    boot.add_argument("--snapshot-root-dir")
    boot.add_argument("--operations-address")
    boot.set_defaults(func=cmd_boot_peer)

    fetch = subparsers.add_parser("peer-fetch-genesis-block", help="Fetch a channel block from an orderer.")
    fetch.add_argument("--config-path", help="Directory holding the peer's core.yaml.")
    fetch.add_argument("--channel-id", required=True)
    fetch.add_argument("--orderer-address", required=True)
    fetch.add_argument("--block-number", default="0", help="Block number, or oldest/newest/config.")
    fetch.add_argument("--output-file", required=True)
    add_flag(fetch, "--tls")
    fetch.add_argument("--tls-ca-cert-file")
    fetch.set_defaults(func=cmd_fetch_genesis_block)

    join = subparsers.add_parser("peer-join-channel", help="Join the peer to a channel from its genesis block.")
    join.add_argument("--config-path", help="Directory holding the peer's core.yaml.")
    join.add_argument("--blockpath", required=True)
    join.set_defaults(func=cmd_join_channel)
