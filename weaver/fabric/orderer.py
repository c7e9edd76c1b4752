"""Builders for the orderer node and osnadmin channel participation."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from weaver.command_builder import CommandBuilder
from weaver.fabric.constants import (
    FABRIC_CFG_PATH,
    ORDERER_CONFIG,
    ORDERER_READY_PATTERN,
    ORDERER_YAML_FILE,
    FabricBinary,
    OrdererCommand,
    OSNAdminCommand,
)
from weaver.options import Option

LISTEN_ADDRESS = Option("General.ListenAddress", path="General.ListenAddress")
LISTEN_PORT = Option("General.ListenPort", path="General.ListenPort")
LOCAL_MSP_DIR = Option("General.LocalMSPDir", path="General.LocalMSPDir")
LOCAL_MSP_ID = Option("General.LocalMSPID", path="General.LocalMSPID")
BOOTSTRAP_METHOD = Option("General.BootstrapMethod", path="General.BootstrapMethod")
TLS_ENABLED = Option("General.TLS.Enabled", path="General.TLS.Enabled")
TLS_CERT = Option("General.TLS.Certificate", path="General.TLS.Certificate")
TLS_KEY = Option("General.TLS.PrivateKey", path="General.TLS.PrivateKey")
TLS_ROOT_CAS = Option("General.TLS.RootCAs", path="General.TLS.RootCAs")
TLS_CLIENT_AUTH = Option("General.TLS.ClientAuthRequired", path="General.TLS.ClientAuthRequired")
TLS_CLIENT_ROOT_CAS = Option("General.TLS.ClientRootCAs", path="General.TLS.ClientRootCAs")
ADMIN_LISTEN_ADDRESS = Option("Admin.ListenAddress", path="Admin.ListenAddress")
ADMIN_TLS_ENABLED = Option("Admin.TLS.Enabled", path="Admin.TLS.Enabled")
ADMIN_TLS_CERT = Option("Admin.TLS.Certificate", path="Admin.TLS.Certificate")
ADMIN_TLS_KEY = Option("Admin.TLS.PrivateKey", path="Admin.TLS.PrivateKey")
ADMIN_TLS_ROOT_CAS = Option("Admin.TLS.RootCAs", path="Admin.TLS.RootCAs")
ADMIN_TLS_CLIENT_AUTH = Option("Admin.TLS.ClientAuthRequired", path="Admin.TLS.ClientAuthRequired")
ADMIN_TLS_CLIENT_ROOT_CAS = Option("Admin.TLS.ClientRootCAs", path="Admin.TLS.ClientRootCAs")
CHANNEL_PARTICIPATION = Option("ChannelParticipation.Enabled", path="ChannelParticipation.Enabled")
CONSENSUS_WAL_DIR = Option("Consensus.WALDir", path="Consensus.WALDir")
CONSENSUS_SNAP_DIR = Option("Consensus.SnapDir", path="Consensus.SnapDir")
FILE_LEDGER_LOCATION = Option("FileLedger.Location", path="FileLedger.Location")
OPERATIONS_ADDRESS = Option("Operations.ListenAddress", path="Operations.ListenAddress")
METRICS_PROVIDER = Option("Metrics.Provider", path="Metrics.Provider")


def _listed(values: Optional[Sequence[str]]):
    return list(values) if values is not None else None


class OrdererBuilder(CommandBuilder):
    """
    orderer node config (orderer.yaml) and ``orderer start``.

    The orderer reads its config from FABRIC_CFG_PATH; ``set_config_path``
    records it for the child environment only.
    """

    binary = FabricBinary.ORDERER.value
    commands = OrdererCommand
    config_filename = ORDERER_CONFIG
    ready_pattern = ORDERER_READY_PATTERN

    def set_config_path(self, cpath: Optional[str] = None):
        if cpath is None:
            return self
        cfg = Path(cpath)
        directory = cfg.parent if cfg.suffix in (".yaml", ".yml") else cfg
        self.set_environment(FABRIC_CFG_PATH, str(directory))
        return self.set_environment(ORDERER_YAML_FILE, str(directory / ORDERER_CONFIG))

    def set_listen_address(self, address: Optional[str] = None):
        return self._set(LISTEN_ADDRESS, address)

    def set_listen_port(self, port: Optional[int] = None):
        return self._set(LISTEN_PORT, port)

    def set_local_msp(self, msp_dir: Optional[str] = None, msp_id: Optional[str] = None):
        self._set(LOCAL_MSP_DIR, msp_dir)
        return self._set(LOCAL_MSP_ID, msp_id)

    def set_bootstrap_method(self, method: Optional[str] = None):
        return self._set(BOOTSTRAP_METHOD, method)

    def set_tls(
        self,
        enabled: Optional[bool] = None,
        certificate: Optional[str] = None,
        private_key: Optional[str] = None,
        root_cas: Optional[Sequence[str]] = None,
        client_auth_required: Optional[bool] = None,
        client_root_cas: Optional[Sequence[str]] = None,
    ):
        self._set(TLS_ENABLED, enabled)
        self._set(TLS_CERT, certificate)
        self._set(TLS_KEY, private_key)
        self._set(TLS_ROOT_CAS, _listed(root_cas))
        self._set(TLS_CLIENT_AUTH, client_auth_required)
        return self._set(TLS_CLIENT_ROOT_CAS, _listed(client_root_cas))

    def set_admin(
        self,
        listen_address: Optional[str] = None,
        tls_enabled: Optional[bool] = None,
        certificate: Optional[str] = None,
        private_key: Optional[str] = None,
        root_cas: Optional[Sequence[str]] = None,
        client_auth_required: Optional[bool] = None,
        client_root_cas: Optional[Sequence[str]] = None,
    ):
        self._set(ADMIN_LISTEN_ADDRESS, listen_address)
        self._set(ADMIN_TLS_ENABLED, tls_enabled)
        self._set(ADMIN_TLS_CERT, certificate)
        self._set(ADMIN_TLS_KEY, private_key)
        self._set(ADMIN_TLS_ROOT_CAS, _listed(root_cas))
        self._set(ADMIN_TLS_CLIENT_AUTH, client_auth_required)
        return self._set(ADMIN_TLS_CLIENT_ROOT_CAS, _listed(client_root_cas))

    def enable_channel_participation(self, enable: Optional[bool] = None):
        return self._set(CHANNEL_PARTICIPATION, enable)

    def set_consensus(self, wal_dir: Optional[str] = None, snap_dir: Optional[str] = None):
        self._set(CONSENSUS_WAL_DIR, wal_dir)
        return self._set(CONSENSUS_SNAP_DIR, snap_dir)

    def set_file_ledger(self, location: Optional[str] = None):
        return self._set(FILE_LEDGER_LOCATION, location)

    def set_operations_address(self, address: Optional[str] = None):
        return self._set(OPERATIONS_ADDRESS, address)

    def set_metrics_provider(self, provider: Optional[str] = None):
        return self._set(METRICS_PROVIDER, provider)


OSN_ORDERER_ADDRESS = Option("orderer-address", flag="orderer-address")
OSN_CA_FILE = Option("ca-file", flag="ca-file")
OSN_CLIENT_CERT = Option("client-cert", flag="client-cert")
OSN_CLIENT_KEY = Option("client-key", flag="client-key")
OSN_NO_STATUS = Option("no-status", flag="no-status")
OSN_CHANNEL_ID = Option(
    "channelID", flag="channelID", commands=(OSNAdminCommand.JOIN, OSNAdminCommand.LIST, OSNAdminCommand.REMOVE)
)
OSN_CONFIG_BLOCK = Option("config-block", flag="config-block", commands=(OSNAdminCommand.JOIN,))


class OSNAdminBuilder(CommandBuilder):
    """``osnadmin channel <join|list|remove>`` with ``--flag=value`` style arguments."""

    binary = FabricBinary.OSN_ADMIN.value
    commands = OSNAdminCommand
    command_prefix = ("channel",)
    inline_flags = True

    def set_orderer_address(self, address: Optional[str] = None):
        return self._set(OSN_ORDERER_ADDRESS, address)

    def set_ca_file(self, ca_file: Optional[str] = None):
        return self._set(OSN_CA_FILE, ca_file)

    def set_client_cert(self, cert: Optional[str] = None):
        return self._set(OSN_CLIENT_CERT, cert)

    def set_client_key(self, key: Optional[str] = None):
        return self._set(OSN_CLIENT_KEY, key)

    def set_no_status(self, no_status: Optional[bool] = None):
        return self._set(OSN_NO_STATUS, no_status)

    def set_channel_id(self, channel_id: Optional[str] = None):
        return self._set(OSN_CHANNEL_ID, channel_id)

    def set_config_block(self, block: Optional[str] = None):
        return self._set(OSN_CONFIG_BLOCK, block)
