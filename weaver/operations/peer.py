"""Peer node workflows: issue core.yaml, start, boot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from weaver.fabric import PeerNodeBuilder
from weaver.fabric.constants import PEER_CONFIG, PeerNodeCommand
from weaver.operations.context import OperationContext
from weaver.process_supervisor import ProcessResult

logger = logging.getLogger("weaver.operations.peer")


@dataclass
class PeerOptions:
    peer_id: Optional[str] = None
    network_id: Optional[str] = None
    listen_address: Optional[str] = None
    address: Optional[str] = None
    chaincode_listen_address: Optional[str] = None
    file_system_path: Optional[str] = None
    msp_id: Optional[str] = None
    msp_dir: Optional[str] = None
    gossip_bootstrap: Optional[str] = None
    gossip_external_endpoint: Optional[str] = None
    tls_enabled: Optional[bool] = None
    tls_client_auth_required: Optional[bool] = None
    tls_cert: Optional[str] = None
    tls_key: Optional[str] = None
    tls_root_cert: Optional[str] = None
    tls_client_cert: Optional[str] = None
    tls_client_key: Optional[str] = None
    tls_client_root_cas: Optional[List[str]] = None
    vm_network_mode: Optional[str] = None
    state_database: Optional[str] = None
    couchdb_address: Optional[str] = None
    couchdb_username: Optional[str] = None
    couchdb_password: Optional[str] = None
    history_database: Optional[bool] = None
    snapshots_root_dir: Optional[str] = None
    operations_address: Optional[str] = None
    metrics_provider: Optional[str] = None


def issue_peer(ctx: OperationContext, cpath: Union[str, Path], opts: PeerOptions) -> Path:
    """Write ``core.yaml`` to ``cpath`` (a directory or a YAML file)."""
    logger.info(f"Issuing peer config at {cpath}")
    builder = PeerNodeBuilder(ctx.template(PEER_CONFIG), ctx.supervisor)
    (
        builder
        .set_general(
            opts.peer_id, opts.network_id, opts.listen_address, opts.address,
            opts.chaincode_listen_address, opts.file_system_path,
        )
        .set_local_msp(opts.msp_id, opts.msp_dir)
        .set_gossip(opts.gossip_bootstrap, opts.gossip_external_endpoint)
        .set_tls(
            opts.tls_enabled, opts.tls_client_auth_required, opts.tls_cert, opts.tls_key,
            opts.tls_root_cert, opts.tls_client_cert, opts.tls_client_key, opts.tls_client_root_cas,
        )
        .set_vm_network_mode(opts.vm_network_mode)
        .set_ledger_state(opts.state_database, opts.couchdb_address, opts.couchdb_username, opts.couchdb_password)
        .enable_history_database(opts.history_database)
        .set_snapshots_root_dir(opts.snapshots_root_dir)
        .set_operations_address(opts.operations_address)
        .set_metrics_provider(opts.metrics_provider)
        .save(cpath)
    )
    return builder.config().resolve_destination(cpath)


async def start_peer(ctx: OperationContext, cpath: Union[str, Path], wait_for_ready: bool = True) -> ProcessResult:
    """Run ``peer node start`` with FABRIC_CFG_PATH pointing at ``cpath``."""
    logger.info(f"Starting peer with config {cpath}")
    builder = (
        PeerNodeBuilder(supervisor=ctx.supervisor)
        .set_command(PeerNodeCommand.START)
        .set_config_path(str(cpath))
    )
    return await builder.execute(wait_for_ready=wait_for_ready, cancel=ctx.cancel)


def has_peer_initialized(cpath: Union[str, Path]) -> bool:
    path = Path(cpath)
    if path.suffix != ".yaml":
        path = path / PEER_CONFIG
    booted = path.exists()
    logger.debug(f"Peer initialized ({path}): {booted}")
    return booted


async def boot_peer(ctx: OperationContext, cpath: Union[str, Path], opts: PeerOptions) -> ProcessResult:
    """Issue ``core.yaml`` unless one exists at ``cpath``, then start the peer."""
    if has_peer_initialized(cpath):
        logger.info("Peer already initialized, keeping existing config")
    else:
        issue_peer(ctx, cpath, opts)
    return await start_peer(ctx, cpath)
