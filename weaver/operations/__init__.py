"""Issue/start/boot workflows for each Fabric component."""

from weaver.operations.ca import (
    CAServerOptions,
    EnrollmentOptions,
    boot_ca,
    client_enrollment,
    has_ca_initialized,
    issue_ca,
    start_ca,
)
from weaver.operations.chaincode import (
    ChaincodeDefinition,
    approve_chaincode,
    check_commit_readiness,
    commit_chaincode,
    install_chaincode,
    package_chaincode,
    query_package_id,
)
from weaver.operations.channel import (
    create_genesis_block,
    peer_fetch_genesis_block,
    peer_join_channel,
    run_configtxlator,
)
from weaver.operations.context import OperationContext, serve
from weaver.operations.orderer import (
    OrdererOptions,
    boot_orderer,
    has_orderer_initialized,
    issue_orderer,
    osn_admin_join,
    start_orderer,
)
from weaver.operations.peer import PeerOptions, boot_peer, has_peer_initialized, issue_peer, start_peer

__all__ = [
    "CAServerOptions",
    "ChaincodeDefinition",
    "EnrollmentOptions",
    "OperationContext",
    "OrdererOptions",
    "PeerOptions",
    "approve_chaincode",
    "boot_ca",
    "boot_orderer",
    "boot_peer",
    "check_commit_readiness",
    "client_enrollment",
    "commit_chaincode",
    "create_genesis_block",
    "has_ca_initialized",
    "has_orderer_initialized",
    "has_peer_initialized",
    "install_chaincode",
    "issue_ca",
    "issue_orderer",
    "issue_peer",
    "osn_admin_join",
    "package_chaincode",
    "peer_fetch_genesis_block",
    "peer_join_channel",
    "query_package_id",
    "run_configtxlator",
    "serve",
    "start_ca",
    "start_orderer",
    "start_peer",
]
