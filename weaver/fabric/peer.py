"""Builders for ``peer node`` (with core.yaml) and ``peer channel``."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from weaver.command_builder import CommandBuilder
from weaver.fabric.constants import (
    FABRIC_CFG_PATH,
    PEER_CONFIG,
    PEER_READY_PATTERN,
    FabricBinary,
    PeerChannelCommand,
    PeerNodeCommand,
)
from weaver.options import Option

NODE_CHANNEL_COMMANDS = (
    PeerNodeCommand.PAUSE, PeerNodeCommand.RESUME, PeerNodeCommand.ROLLBACK, PeerNodeCommand.UNJOIN,
)

DEV_MODE = Option("peer-chaincodedev", flag="peer-chaincodedev", commands=(PeerNodeCommand.START,))
BLOCK_NUMBER = Option("blockNumber", flag="blockNumber", commands=(PeerNodeCommand.ROLLBACK,))
NODE_CHANNEL_ID = Option("channelID", flag="channelID", commands=NODE_CHANNEL_COMMANDS)

PEER_ID = Option("peer.id", path="peer.id")
NETWORK_ID = Option("peer.networkId", path="peer.networkId")
LISTEN_ADDRESS = Option("peer.listenAddress", path="peer.listenAddress")
ADDRESS = Option("peer.address", path="peer.address")
CHAINCODE_LISTEN_ADDRESS = Option("peer.chaincodeListenAddress", path="peer.chaincodeListenAddress")
FILE_SYSTEM_PATH = Option("peer.fileSystemPath", path="peer.fileSystemPath")
LOCAL_MSP_ID = Option("peer.localMspId", path="peer.localMspId")
LOCAL_MSP_DIR = Option("peer.mspConfigPath", path="peer.mspConfigPath")
GOSSIP_BOOTSTRAP = Option("peer.gossip.bootstrap", path="peer.gossip.bootstrap")
GOSSIP_EXTERNAL = Option("peer.gossip.externalEndpoint", path="peer.gossip.externalEndpoint")
TLS_ENABLED = Option("peer.tls.enabled", path="peer.tls.enabled")
TLS_CLIENT_AUTH = Option("peer.tls.clientAuthRequired", path="peer.tls.clientAuthRequired")
TLS_CERT = Option("peer.tls.cert.file", path="peer.tls.cert.file")
TLS_KEY = Option("peer.tls.key.file", path="peer.tls.key.file")
TLS_ROOT_CERT = Option("peer.tls.rootcert.file", path="peer.tls.rootcert.file")
TLS_CLIENT_CERT = Option("peer.tls.clientCert.file", path="peer.tls.clientCert.file")
TLS_CLIENT_KEY = Option("peer.tls.clientKey.file", path="peer.tls.clientKey.file")
TLS_CLIENT_ROOT_CAS = Option("peer.tls.clientRootCAs.files", path="peer.tls.clientRootCAs.files")
VM_NETWORK_MODE = Option("vm.docker.hostConfig.NetworkMode", path="vm.docker.hostConfig.NetworkMode")
STATE_DATABASE = Option("ledger.state.stateDatabase", path="ledger.state.stateDatabase")
COUCHDB_ADDRESS = Option("ledger.state.couchDBConfig.couchDBAddress", path="ledger.state.couchDBConfig.couchDBAddress")
COUCHDB_USERNAME = Option("ledger.state.couchDBConfig.username", path="ledger.state.couchDBConfig.username")
COUCHDB_PASSWORD = Option("ledger.state.couchDBConfig.password", path="ledger.state.couchDBConfig.password")
HISTORY_DATABASE = Option("ledger.history.enableHistoryDatabase", path="ledger.history.enableHistoryDatabase")
SNAPSHOTS_ROOT_DIR = Option("ledger.snapshots.rootDir", path="ledger.snapshots.rootDir")
OPERATIONS_ADDRESS = Option("operations.listenAddress", path="operations.listenAddress")
METRICS_PROVIDER = Option("metrics.provider", path="metrics.provider")


class PeerNodeBuilder(CommandBuilder):
    """``peer node <command>`` and the peer's core.yaml."""

    binary = FabricBinary.PEER.value
    commands = PeerNodeCommand
    command_prefix = ("node",)
    config_filename = PEER_CONFIG
    ready_pattern = PEER_READY_PATTERN

    def set_config_path(self, cpath: Optional[str] = None):
        if cpath is None:
            return self
        cfg = Path(cpath)
        directory = cfg.parent if cfg.suffix in (".yaml", ".yml") else cfg
        return self.set_environment(FABRIC_CFG_PATH, str(directory))

    def enable_dev_mode(self, enable: Optional[bool] = None):
        return self._set(DEV_MODE, enable)

    def set_block_number(self, number: Optional[int] = None):
        return self._set(BLOCK_NUMBER, number)

    def set_channel_id(self, channel_id: Optional[str] = None):
        return self._set(NODE_CHANNEL_ID, channel_id)

    def set_general(
        self,
        peer_id: Optional[str] = None,
        network_id: Optional[str] = None,
        listen_address: Optional[str] = None,
        address: Optional[str] = None,
        chaincode_listen_address: Optional[str] = None,
        file_system_path: Optional[str] = None,
    ):
        self._set(PEER_ID, peer_id)
        self._set(NETWORK_ID, network_id)
        self._set(LISTEN_ADDRESS, listen_address)
        self._set(ADDRESS, address)
        self._set(CHAINCODE_LISTEN_ADDRESS, chaincode_listen_address)
        return self._set(FILE_SYSTEM_PATH, file_system_path)

    def set_local_msp(self, msp_id: Optional[str] = None, msp_dir: Optional[str] = None):
        self._set(LOCAL_MSP_ID, msp_id)
        return self._set(LOCAL_MSP_DIR, msp_dir)

    def set_gossip(self, bootstrap: Optional[str] = None, external_endpoint: Optional[str] = None):
        self._set(GOSSIP_BOOTSTRAP, bootstrap)
        return self._set(GOSSIP_EXTERNAL, external_endpoint)

    def set_tls(
        self,
        enabled: Optional[bool] = None,
        client_auth_required: Optional[bool] = None,
        cert: Optional[str] = None,
        key: Optional[str] = None,
        root_cert: Optional[str] = None,
        client_cert: Optional[str] = None,
        client_key: Optional[str] = None,
        client_root_cas: Optional[Sequence[str]] = None,
    ):
        self._set(TLS_ENABLED, enabled)
        self._set(TLS_CLIENT_AUTH, client_auth_required)
        self._set(TLS_CERT, cert)
        self._set(TLS_KEY, key)
        self._set(TLS_ROOT_CERT, root_cert)
        self._set(TLS_CLIENT_CERT, client_cert)
        self._set(TLS_CLIENT_KEY, client_key)
        return self._set(TLS_CLIENT_ROOT_CAS, list(client_root_cas) if client_root_cas is not None else None)

    def set_vm_network_mode(self, mode: Optional[str] = None):
        return self._set(VM_NETWORK_MODE, mode)

    def set_ledger_state(
        self,
        state_database: Optional[str] = None,
        couchdb_address: Optional[str] = None,
        couchdb_username: Optional[str] = None,
        couchdb_password: Optional[str] = None,
    ):
        self._set(STATE_DATABASE, state_database)
        self._set(COUCHDB_ADDRESS, couchdb_address)
        self._set(COUCHDB_USERNAME, couchdb_username)
        return self._set(COUCHDB_PASSWORD, couchdb_password)

    def enable_history_database(self, enable: Optional[bool] = None):
        return self._set(HISTORY_DATABASE, enable)

    def set_snapshots_root_dir(self, path: Optional[str] = None):
        return self._set(SNAPSHOTS_ROOT_DIR, path)

    def set_operations_address(self, address: Optional[str] = None):
        return self._set(OPERATIONS_ADDRESS, address)

    def set_metrics_provider(self, provider: Optional[str] = None):
        return self._set(METRICS_PROVIDER, provider)


CH_CHANNEL_ID = Option("channelID", flag="channelID")
CH_ORDERER = Option("orderer", flag="orderer")
CH_TLS = Option("tls", flag="tls")
CH_CAFILE = Option("cafile", flag="cafile")
CH_BLOCKPATH = Option(
    "blockpath", flag="blockpath", commands=(PeerChannelCommand.JOIN, PeerChannelCommand.JOINBYSNAPSHOT)
)
CH_FILE = Option(
    "file", flag="file",
    commands=(PeerChannelCommand.CREATE, PeerChannelCommand.SIGNCONFIGTX, PeerChannelCommand.UPDATE),
)
CH_OUTPUT_BLOCK = Option("outputBlock", flag="outputBlock", commands=(PeerChannelCommand.CREATE,))


class PeerChannelBuilder(CommandBuilder):
    """
    ``peer channel <command>``.

    ``fetch`` takes the block reference and the output file as positional
    arguments, in that order.
    """

    binary = FabricBinary.PEER.value
    commands = PeerChannelCommand
    command_prefix = ("channel",)

    def set_config_path(self, cpath: Optional[str] = None):
        return self.set_environment(FABRIC_CFG_PATH, cpath)

    def set_block_reference(self, reference: Optional[str] = None):
        if reference is not None:
            self.assert_command(PeerChannelCommand.FETCH)
        return self.add_positional(reference)

    def set_destination(self, destination: Optional[str] = None):
        if destination is not None:
            self.assert_command(PeerChannelCommand.FETCH)
        return self.add_positional(destination)

    def set_channel_id(self, channel_id: Optional[str] = None):
        return self._set(CH_CHANNEL_ID, channel_id)

    def set_orderer(self, orderer: Optional[str] = None):
        return self._set(CH_ORDERER, orderer)

    def enable_tls(self, enable: Optional[bool] = None):
        return self._set(CH_TLS, enable)

    def set_tls_ca_file(self, ca_file: Optional[str] = None):
        return self._set(CH_CAFILE, ca_file)

    def set_block_path(self, block_path: Optional[str] = None):
        return self._set(CH_BLOCKPATH, block_path)

    def set_file(self, file: Optional[str] = None):
        return self._set(CH_FILE, file)

    def set_output_block(self, path: Optional[str] = None):
        return self._set(CH_OUTPUT_BLOCK, path)
