"""NodeOU classification file (``<mspdir>/config.yaml``)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from weaver.config_tree import ConfigTree
from weaver.fabric.constants import CA_CERT_FILE, NODE_OU_CONFIG

logger = logging.getLogger(__name__)

OU_ROLES = (
    ("ClientOUIdentifier", "client"),
    ("AdminOUIdentifier", "admin"),
    ("OrdererOUIdentifier", "orderer"),
    ("PeerOUIdentifier", "peer"),
)


def find_ca_cert(mspdir: Union[str, Path]) -> str:
    """First file in ``<mspdir>/cacerts``, or ``ca-cert.pem`` when there is none."""
    cacerts = Path(mspdir) / "cacerts"
    try:
        files = sorted(p.name for p in cacerts.iterdir() if p.is_file())
    except OSError as e:
        logger.warning(f"Could not list {cacerts}: {e}")
        return CA_CERT_FILE
    return files[0] if files else CA_CERT_FILE


def node_ou_document(enable: bool, cert_path: str) -> Dict[str, Any]:
    node_ous: Dict[str, Any] = {"Enable": enable}
    for key, role in OU_ROLES:
        node_ous[key] = {"Certificate": cert_path, "OrganizationalUnitIdentifier": role}
    return {"NodeOUs": node_ous}


def write_node_ou(
    mspdir: Union[str, Path] = "msp",
    enable: bool = False,
    path_from_mspdir: str = "cacerts",
    cert: Optional[str] = None,
) -> Path:
    """Write the NodeOU config into ``mspdir`` and return the file path."""
    cert = cert or find_ca_cert(mspdir)
    tree = ConfigTree(node_ou_document(enable, f"{path_from_mspdir}/{cert}"), NODE_OU_CONFIG)
    target = tree.resolve_destination(mspdir)
    logger.info(f"Writing node OU configuration to {target}")
    tree.save(mspdir)
    return target
