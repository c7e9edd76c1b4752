"""Builder for ``peer lifecycle chaincode`` and parsers for its JSON output."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from weaver.command_builder import CommandBuilder
from weaver.errors import StatusParseError
from weaver.fabric.constants import FABRIC_CFG_PATH, FabricBinary, LifecycleCommand
from weaver.options import Option

logger = logging.getLogger(__name__)

C = LifecycleCommand
DEFINITION = (C.APPROVEFORMYORG, C.CHECKCOMMITREADINESS, C.COMMIT, C.QUERYAPPROVED, C.QUERYCOMMITTED)
ORDERING = (C.APPROVEFORMYORG, C.COMMIT)
PEER_TARGETED = (C.APPROVEFORMYORG, C.CHECKCOMMITREADINESS, C.COMMIT, C.QUERYCOMMITTED)

CONTRACT_PATH = Option("path", flag="path", commands=(C.PACKAGE,))
LANG = Option("lang", flag="lang", commands=(C.PACKAGE,))
LABEL = Option("label", flag="label", commands=(C.PACKAGE, C.CALCULATEPACKAGEID))
ORDERER = Option("orderer", flag="orderer", commands=ORDERING)
CHANNEL_ID = Option("channelID", flag="channelID", commands=DEFINITION)
NAME = Option("name", flag="name", commands=DEFINITION)
VERSION = Option("version", flag="version", commands=(C.APPROVEFORMYORG, C.CHECKCOMMITREADINESS, C.COMMIT))
PACKAGE_ID = Option("package-id", flag="package-id", commands=(C.APPROVEFORMYORG, C.GETINSTALLEDPACKAGE))
SEQUENCE = Option("sequence", flag="sequence", commands=(C.APPROVEFORMYORG, C.CHECKCOMMITREADINESS, C.COMMIT, C.QUERYAPPROVED))
INIT_REQUIRED = Option("init-required", flag="init-required", commands=(C.APPROVEFORMYORG, C.CHECKCOMMITREADINESS, C.COMMIT))
SIGNATURE_POLICY = Option(
    "signature-policy", flag="signature-policy", commands=(C.APPROVEFORMYORG, C.CHECKCOMMITREADINESS, C.COMMIT)
)
TLS = Option("tls", flag="tls")
CAFILE = Option("cafile", flag="cafile")
ORDERER_TLS_HOSTNAME = Option("ordererTLSHostnameOverride", flag="ordererTLSHostnameOverride", commands=ORDERING)
COLLECTIONS_CONFIG = Option(
    "collections-config", flag="collections-config", commands=(C.APPROVEFORMYORG, C.CHECKCOMMITREADINESS, C.COMMIT)
)
OUTPUT = Option("output", flag="output")


class PeerLifecycleBuilder(CommandBuilder):
    """
    ``peer lifecycle chaincode <command>``.

    ``package`` and ``install`` take the package file as a positional
    argument. Endorsing peers are emitted last as repeated
    ``--peerAddresses``/``--tlsRootCertFiles`` pairs.
    """

    binary = FabricBinary.PEER.value
    commands = LifecycleCommand
    command_prefix = ("lifecycle", "chaincode")

    def set_config_path(self, cpath: Optional[str] = None):
        return self.set_environment(FABRIC_CFG_PATH, cpath)

    def set_destination(self, destination: Optional[str] = None):
        if destination is not None:
            self.assert_command(C.PACKAGE, C.INSTALL)
        return self.add_positional(destination)

    def set_contract_path(self, path: Optional[str] = None):
        return self._set(CONTRACT_PATH, path)

    def set_lang(self, lang: Optional[str] = None):
        return self._set(LANG, lang)

    def set_label(self, label: Optional[str] = None):
        return self._set(LABEL, label)

    def set_orderer_address(self, address: Optional[str] = None):
        return self._set(ORDERER, address)

    def set_channel_id(self, channel_id: Optional[str] = None):
        return self._set(CHANNEL_ID, channel_id)

    def set_contract_name(self, name: Optional[str] = None):
        return self._set(NAME, name)

    def set_version(self, version: Optional[str] = None):
        return self._set(VERSION, version)

    def set_package_id(self, package_id: Optional[str] = None):
        return self._set(PACKAGE_ID, package_id)

    def set_sequence(self, sequence: Optional[int] = None):
        return self._set(SEQUENCE, sequence)

    def enable_init_required(self, enable: Optional[bool] = None):
        return self._set(INIT_REQUIRED, enable)

    def set_signature_policy(self, policy: Optional[str] = None):
        return self._set(SIGNATURE_POLICY, policy)

    def enable_tls(self, enable: Optional[bool] = None):
        return self._set(TLS, enable)

    def set_tls_ca_file(self, ca_file: Optional[str] = None):
        return self._set(CAFILE, ca_file)

    def set_orderer_tls_hostname_override(self, hostname: Optional[str] = None):
        return self._set(ORDERER_TLS_HOSTNAME, hostname)

    def set_collections_config_path(self, path: Optional[str] = None):
        return self._set(COLLECTIONS_CONFIG, path)

    def set_output(self, output: Optional[str] = None):
        return self._set(OUTPUT, output)

    def set_peers(self, addresses: Optional[Sequence[str]] = None, tls_roots: Optional[Sequence[str]] = None):
        """Target endorsing peers; ``tls_roots[i]`` pairs with ``addresses[i]``."""
        if not addresses:
            return self
        self.assert_command(*PEER_TARGETED)
        roots = list(tls_roots or [])
        pairs = []
        for i, address in enumerate(addresses):
            pairs.append(("peerAddresses", address))
            if i < len(roots):
                pairs.append(("tlsRootCertFiles", roots[i]))
        self.log.debug(f"Setting peers: {', '.join(addresses)}")
        return self.add_repeated(pairs)


def _load_json(payload: str, what: str) -> Any:
    try:
        return json.loads(payload)
    except (TypeError, ValueError) as e:
        raise StatusParseError(f"{what} is not valid JSON: {e}", payload=payload or "") from e


def parse_installed_packages(payload: str) -> List[Dict[str, str]]:
    """Parse ``queryinstalled --output json`` into ``[{package_id, label}]``."""
    data = _load_json(payload, "queryinstalled output")
    if not isinstance(data, dict):
        raise StatusParseError("queryinstalled output is not an object", payload=payload)
    installed = data.get("installed_chaincodes") or []
    if not isinstance(installed, list):
        raise StatusParseError("installed_chaincodes is not a list", payload=payload)
    packages = []
    for entry in installed:
        if not isinstance(entry, dict) or "package_id" not in entry:
            raise StatusParseError("installed chaincode entry has no package_id", payload=payload)
        packages.append({"package_id": entry["package_id"], "label": entry.get("label", "")})
    return packages


def select_package_id(payload: str, label: Optional[str] = None) -> str:
    """
    Pick the package id to approve.

    With ``label`` the matching package is used; otherwise the first
    installed package.
    """
    packages = parse_installed_packages(payload)
    if label is not None:
        packages = [p for p in packages if p["label"] == label]
    if not packages:
        raise StatusParseError(
            f"No installed chaincode package{f' labelled {label}' if label else ''}", payload=payload,
        )
    return packages[0]["package_id"]
