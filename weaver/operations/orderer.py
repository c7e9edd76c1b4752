"""Ordering node workflows and osnadmin channel participation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from weaver.fabric import OrdererBuilder, OSNAdminBuilder
from weaver.fabric.constants import ORDERER_CONFIG, OrdererCommand, OSNAdminCommand
from weaver.operations.context import OperationContext
from weaver.process_supervisor import ProcessResult

logger = logging.getLogger("weaver.operations.orderer")


@dataclass
class OrdererOptions:
    listen_address: Optional[str] = None
    port: Optional[int] = None
    msp_dir: Optional[str] = None
    msp_id: Optional[str] = None
    bootstrap_method: Optional[str] = None
    channel_participation_enabled: Optional[bool] = None
    tls_enabled: Optional[bool] = None
    tls_cert: Optional[str] = None
    tls_key: Optional[str] = None
    tls_root_cas: Optional[List[str]] = None
    tls_client_auth_required: Optional[bool] = None
    admin_listen_address: Optional[str] = None
    admin_tls_enabled: Optional[bool] = None
    admin_tls_cert: Optional[str] = None
    admin_tls_key: Optional[str] = None
    admin_tls_root_cas: Optional[List[str]] = None
    admin_tls_client_auth_required: Optional[bool] = None
    admin_tls_client_root_cas: Optional[List[str]] = None
    consensus_wal_dir: Optional[str] = None
    consensus_snap_dir: Optional[str] = None
    file_ledger_location: Optional[str] = None
    operations_address: Optional[str] = None
    metrics_provider: Optional[str] = None


def issue_orderer(ctx: OperationContext, cpath: Union[str, Path], opts: OrdererOptions) -> Path:
    """Write ``orderer.yaml`` to ``cpath`` (a directory or a YAML file)."""
    logger.info(f"Issuing orderer config at {cpath}")
    builder = OrdererBuilder(ctx.template(ORDERER_CONFIG), ctx.supervisor)
    (
        builder
        .set_listen_address(opts.listen_address)
        .set_listen_port(opts.port)
        .set_local_msp(opts.msp_dir, opts.msp_id)
        .set_bootstrap_method(opts.bootstrap_method)
        .enable_channel_participation(opts.channel_participation_enabled)
        .set_tls(opts.tls_enabled, opts.tls_cert, opts.tls_key, opts.tls_root_cas, opts.tls_client_auth_required)
        .set_admin(
            opts.admin_listen_address, opts.admin_tls_enabled, opts.admin_tls_cert, opts.admin_tls_key,
            opts.admin_tls_root_cas, opts.admin_tls_client_auth_required, opts.admin_tls_client_root_cas,
        )
        .set_consensus(opts.consensus_wal_dir, opts.consensus_snap_dir)
        .set_file_ledger(opts.file_ledger_location)
        .set_operations_address(opts.operations_address)
        .set_metrics_provider(opts.metrics_provider)
        .save(cpath)
    )
    return builder.config().resolve_destination(cpath)


async def start_orderer(ctx: OperationContext, cpath: Union[str, Path], wait_for_ready: bool = True) -> ProcessResult:
    """Run ``orderer start`` against the config at ``cpath``."""
    logger.info(f"Starting orderer with config {cpath}")
    builder = (
        OrdererBuilder(supervisor=ctx.supervisor)
        .set_command(OrdererCommand.START)
        .set_config_path(str(cpath))
    )
    return await builder.execute(wait_for_ready=wait_for_ready, cancel=ctx.cancel)


def has_orderer_initialized(cpath: Union[str, Path]) -> bool:
    path = Path(cpath)
    if path.suffix not in (".yaml", ".yml"):
        path = path / ORDERER_CONFIG
    booted = path.exists()
    logger.debug(f"Orderer initialized ({path}): {booted}")
    return booted


async def boot_orderer(ctx: OperationContext, cpath: Union[str, Path], opts: OrdererOptions) -> ProcessResult:
    """Rewrite the orderer config from ``opts`` and start the node."""
    issue_orderer(ctx, cpath, opts)
    return await start_orderer(ctx, cpath)


async def osn_admin_join(
    ctx: OperationContext,
    channel_id: Optional[str] = None,
    config_block: Optional[str] = None,
    admin_address: Optional[str] = None,
    ca_file: Optional[str] = None,
    client_cert: Optional[str] = None,
    client_key: Optional[str] = None,
    no_status: Optional[bool] = None,
) -> ProcessResult:
    """Join the orderer at ``admin_address`` to a channel with ``osnadmin channel join``."""
    logger.info(f"Joining orderer {admin_address} to channel {channel_id}")
    builder = (
        OSNAdminBuilder(supervisor=ctx.supervisor)
        .set_command(OSNAdminCommand.JOIN)
        .set_orderer_address(admin_address)
        .set_ca_file(ca_file)
        .set_client_cert(client_cert)
        .set_client_key(client_key)
        .set_no_status(no_status)
        .set_channel_id(channel_id)
        .set_config_block(config_block)
    )
    return await builder.execute(cancel=ctx.cancel)
