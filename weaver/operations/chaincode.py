"""
Chaincode lifecycle: package, install, approve and commit.

Commit waits for a strict majority of organisations to approve the
definition, polling ``checkcommitreadiness`` at the configured interval.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from weaver.fabric import PeerLifecycleBuilder, select_package_id
from weaver.fabric.constants import LifecycleCommand
from weaver.operations.context import OperationContext
from weaver.process_supervisor import ProcessResult
from weaver.readiness_poll import ApprovalStatus, ReadinessPoll, parse_approval_status

logger = logging.getLogger("weaver.operations.chaincode")


def package_label(name: str, version: str) -> str:
    return f"{name}_{version}"


@dataclass
class ChaincodeDefinition:
    """What approve, checkcommitreadiness and commit agree on."""
    channel_id: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    sequence: Optional[int] = None
    orderer_address: Optional[str] = None
    tls_enabled: Optional[bool] = None
    tls_ca_file: Optional[str] = None
    collections_config: Optional[str] = None
    orderer_tls_hostname_override: Optional[str] = None
    init_required: Optional[bool] = None
    signature_policy: Optional[str] = None
    config_path: Optional[str] = None

    @property
    def label(self) -> Optional[str]:
        if self.name is None or self.version is None:
            return None
        return package_label(self.name, self.version)


def _lifecycle(ctx: OperationContext, command: LifecycleCommand, config_path: Optional[str] = None) -> PeerLifecycleBuilder:
    return PeerLifecycleBuilder(supervisor=ctx.supervisor).set_command(command).set_config_path(config_path)


def _definition(builder: PeerLifecycleBuilder, cc: ChaincodeDefinition) -> PeerLifecycleBuilder:
    return (
        builder
        .set_channel_id(cc.channel_id)
        .set_contract_name(cc.name)
        .set_version(cc.version)
        .set_sequence(cc.sequence)
        .enable_init_required(cc.init_required)
        .set_signature_policy(cc.signature_policy)
        .enable_tls(cc.tls_enabled)
        .set_tls_ca_file(cc.tls_ca_file)
        .set_collections_config_path(cc.collections_config)
    )


async def package_chaincode(
    ctx: OperationContext,
    output_file: str,
    contract_path: Optional[str] = None,
    lang: Optional[str] = None,
    name: Optional[str] = None,
    version: Optional[str] = None,
    config_path: Optional[str] = None,
) -> ProcessResult:
    """``peer lifecycle chaincode package`` labelled ``<name>_<version>``."""
    label = package_label(name, version) if name and version else None
    builder = (
        _lifecycle(ctx, LifecycleCommand.PACKAGE, config_path)
        .set_destination(output_file)
        .set_contract_path(contract_path)
        .set_lang(lang)
        .set_label(label)
    )
    logger.info(f"Packaging chaincode {label or contract_path} into {output_file}")
    return await builder.execute(cancel=ctx.cancel)


async def install_chaincode(ctx: OperationContext, package_file: str, config_path: Optional[str] = None) -> ProcessResult:
    builder = _lifecycle(ctx, LifecycleCommand.INSTALL, config_path).set_destination(package_file)
    logger.info(f"Installing chaincode package {package_file}")
    return await builder.execute(cancel=ctx.cancel)


async def query_package_id(ctx: OperationContext, label: Optional[str] = None, config_path: Optional[str] = None) -> str:
    """Package id of the installed chaincode labelled ``label`` (or the first one)."""
    builder = _lifecycle(ctx, LifecycleCommand.QUERYINSTALLED, config_path).set_output("json")
    result = await builder.execute(cancel=ctx.cancel, echo=False)
    package_id = select_package_id(result.stdout, label)
    logger.debug(f"Using package id: {package_id}")
    return package_id


async def approve_chaincode(
    ctx: OperationContext,
    cc: ChaincodeDefinition,
    package_id: Optional[str] = None,
) -> ProcessResult:
    """Approve ``cc`` for this peer's organisation, looking up the package id when not given."""
    if package_id is None:
        package_id = await query_package_id(ctx, cc.label, cc.config_path)
    builder = (
        _definition(_lifecycle(ctx, LifecycleCommand.APPROVEFORMYORG, cc.config_path), cc)
        .set_orderer_address(cc.orderer_address)
        .set_orderer_tls_hostname_override(cc.orderer_tls_hostname_override)
        .set_package_id(package_id)
    )
    logger.info(f"Approving chaincode {cc.name} {cc.version} (sequence {cc.sequence}) on {cc.channel_id}")
    return await builder.execute(cancel=ctx.cancel)


async def check_commit_readiness(ctx: OperationContext, cc: ChaincodeDefinition) -> ApprovalStatus:
    builder = _definition(_lifecycle(ctx, LifecycleCommand.CHECKCOMMITREADINESS, cc.config_path), cc).set_output("json")
    result = await builder.execute(cancel=ctx.cancel, echo=False)
    return parse_approval_status(result.stdout)


async def commit_chaincode(
    ctx: OperationContext,
    cc: ChaincodeDefinition,
    peer_addresses: Optional[List[str]] = None,
    peer_tls_roots: Optional[List[str]] = None,
    interval: Optional[float] = None,
) -> ProcessResult:
    """
    Commit ``cc`` once a strict majority of organisations has approved it.

    Polling honours ``settings.poll_interval``, ``poll_max_attempts`` and
    ``poll_max_duration``; ``ctx.cancel`` stops it.

    Raises:
        QuorumNotReached: the poll bounds ran out first.
        OperationCancelled: the context was cancelled.
    """
    settings = ctx.settings

    async def status_check() -> ApprovalStatus:
        return await check_commit_readiness(ctx, cc)

    async def commit() -> ProcessResult:
        builder = (
            _definition(_lifecycle(ctx, LifecycleCommand.COMMIT, cc.config_path), cc)
            .set_orderer_address(cc.orderer_address)
            .set_orderer_tls_hostname_override(cc.orderer_tls_hostname_override)
            .set_peers(peer_addresses, peer_tls_roots)
        )
        return await builder.execute(cancel=ctx.cancel)

    logger.info(f"Committing chaincode {cc.name} {cc.version} (sequence {cc.sequence}) on {cc.channel_id}")
    poll = ReadinessPoll(
        status_check,
        commit,
        interval=interval or settings.poll_interval,
        max_attempts=settings.poll_max_attempts,
        max_duration=settings.poll_max_duration,
        cancel=ctx.cancel,
    )
    result = await poll.run()
    logger.info(f"Chaincode {cc.name} committed after {poll.attempts} readiness check(s)")
    return result
