"""Builders for the Hyperledger Fabric binaries."""

from weaver.fabric.ca_client import FabricCAClientBuilder, rename_keystore_key
from weaver.fabric.ca_server import FabricCAServerBuilder
from weaver.fabric.configtxgen import ConfigtxgenBuilder
from weaver.fabric.configtxlator import ConfigtxlatorBuilder
from weaver.fabric.lifecycle import PeerLifecycleBuilder, parse_installed_packages, select_package_id
from weaver.fabric.node_ou import find_ca_cert, write_node_ou
from weaver.fabric.orderer import OrdererBuilder, OSNAdminBuilder
from weaver.fabric.peer import PeerChannelBuilder, PeerNodeBuilder

__all__ = [
    "FabricCAClientBuilder",
    "FabricCAServerBuilder",
    "ConfigtxgenBuilder",
    "ConfigtxlatorBuilder",
    "OrdererBuilder",
    "OSNAdminBuilder",
    "PeerChannelBuilder",
    "PeerLifecycleBuilder",
    "PeerNodeBuilder",
    "find_ca_cert",
    "parse_installed_packages",
    "rename_keystore_key",
    "select_package_id",
    "write_node_ou",
]
