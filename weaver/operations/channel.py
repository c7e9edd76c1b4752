"""Channel artifacts and membership: genesis blocks, config translation, block fetch, peer join."""

from __future__ import annotations

import logging
from typing import List, Optional

from weaver.fabric import ConfigtxgenBuilder, ConfigtxlatorBuilder, PeerChannelBuilder
from weaver.fabric.constants import ConfigtxlatorCommand, PeerChannelCommand
from weaver.operations.context import OperationContext
from weaver.process_supervisor import ProcessResult

logger = logging.getLogger("weaver.operations.channel")


async def create_genesis_block(
    ctx: OperationContext,
    config_path: Optional[str] = None,
    profile: Optional[str] = None,
    channel_id: Optional[str] = None,
    output_block: Optional[str] = None,
    as_org: Optional[str] = None,
    inspect_block: Optional[str] = None,
) -> ProcessResult:
    """Run configtxgen; with the defaults above this writes a channel genesis block."""
    builder = (
        ConfigtxgenBuilder(supervisor=ctx.supervisor)
        .set_config_path(config_path)
        .set_profile(profile)
        .set_channel_id(channel_id)
        .set_output_block(output_block)
        .set_as_org(as_org)
        .set_inspect_block(inspect_block)
    )
    logger.info(f"Creating genesis block for channel {channel_id} (profile {profile})")
    result = await builder.execute(cancel=ctx.cancel)
    if output_block:
        logger.info(f"Genesis block written to {output_block}")
    return result


async def peer_fetch_genesis_block(
    ctx: OperationContext,
    channel_id: Optional[str] = None,
    orderer_address: Optional[str] = None,
    block_number: Optional[str] = None,
    output_file: Optional[str] = None,
    tls_enabled: Optional[bool] = None,
    tls_ca_cert_file: Optional[str] = None,
    config_path: Optional[str] = None,
) -> ProcessResult:
    """``peer channel fetch <block> <output>`` against an orderer."""
    builder = (
        PeerChannelBuilder(supervisor=ctx.supervisor)
        .set_command(PeerChannelCommand.FETCH)
        .set_config_path(config_path)
        .set_block_reference(block_number)
        .set_destination(output_file)
        .set_orderer(orderer_address)
        .set_channel_id(channel_id)
        .enable_tls(tls_enabled)
        .set_tls_ca_file(tls_ca_cert_file)
    )
    logger.info(f"Fetching block {block_number} of {channel_id} from {orderer_address}")
    return await builder.execute(cancel=ctx.cancel)


async def peer_join_channel(
    ctx: OperationContext,
    block_path: Optional[str] = None,
    config_path: Optional[str] = None,
) -> ProcessResult:
    builder = (
        PeerChannelBuilder(supervisor=ctx.supervisor)
        .set_command(PeerChannelCommand.JOIN)
        .set_config_path(config_path)
        .set_block_path(block_path)
    )
    logger.info(f"Joining channel from block {block_path}")
    return await builder.execute(cancel=ctx.cancel)


async def run_configtxlator(
    ctx: OperationContext,
    command: str,
    message_type: Optional[str] = None,
    input_file: Optional[str] = None,
    output_file: Optional[str] = None,
    original: Optional[str] = None,
    updated: Optional[str] = None,
    channel_id: Optional[str] = None,
    hostname: Optional[str] = None,
    port: Optional[int] = None,
    cors: Optional[List[str]] = None,
) -> ProcessResult:
    """
    Translate config artifacts with configtxlator.

    ``start`` resolves once the REST server is listening and leaves it
    running; every other command runs to completion.
    """
    builder = (
        ConfigtxlatorBuilder(supervisor=ctx.supervisor)
        .set_command(command)
        .set_hostname(hostname)
        .set_port(port)
        .set_cors(cors)
        .set_type(message_type)
        .set_input(input_file)
        .set_original(original)
        .set_updated(updated)
        .set_channel_id(channel_id)
        .set_output(output_file)
    )
    serving = builder.command is ConfigtxlatorCommand.START
    logger.info(f"Running configtxlator {builder.command.value}")
    result = await builder.execute(wait_for_ready=serving, cancel=ctx.cancel)
    if output_file and not serving:
        logger.info(f"configtxlator output written to {output_file}")
    return result
