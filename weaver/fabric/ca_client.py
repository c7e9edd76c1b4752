"""Builder for fabric-ca-client enrollment and registration commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from weaver.command_builder import CommandBuilder
from weaver.errors import ConfigWriteError
from weaver.fabric.constants import CA_CLIENT_CONFIG, CAClientCommand, FabricBinary
from weaver.options import Option

logger = logging.getLogger(__name__)

ENROLL = (CAClientCommand.ENROLL, CAClientCommand.REENROLL)
CSR = (CAClientCommand.ENROLL, CAClientCommand.REENROLL, CAClientCommand.GENCSR)
IDENTITY = (CAClientCommand.REGISTER, CAClientCommand.IDENTITY)

URL = Option("url", flag="url", path="url")
MSPDIR = Option("mspdir", flag="mspdir", path="mspdir")
HOME = Option("home", flag="home")
CA_NAME = Option("caname", flag="caname", path="caname")
DEBUG = Option("debug", flag="debug")
LOG_LEVEL = Option("loglevel", flag="loglevel")
MY_HOST = Option("myhost", flag="myhost")
IDEMIX_CURVE = Option("idemix.curve", flag="idemix.curve", path="idemixCurveID")
TLS_CERTFILES = Option("tls.certfiles", flag="tls.certfiles", path="tls.certfiles")
TLS_CLIENT_CERTFILE = Option("tls.client.certfile", flag="tls.client.certfile", path="tls.client.certfile")
TLS_CLIENT_KEYFILE = Option("tls.client.keyfile", flag="tls.client.keyfile", path="tls.client.keyfile")
ID_NAME = Option("id.name", flag="id.name", path="id.name", commands=IDENTITY)
ID_SECRET = Option("id.secret", flag="id.secret", path="id.secret", commands=IDENTITY)
ID_TYPE = Option("id.type", flag="id.type", path="id.type", commands=IDENTITY)
ID_AFFILIATION = Option("id.affiliation", flag="id.affiliation", path="id.affiliation", commands=IDENTITY)
ID_MAX_ENROLLMENTS = Option(
    "id.maxenrollments", flag="id.maxenrollments", path="id.maxenrollments", commands=IDENTITY
)
ID_ATTRS = Option("id.attrs", flag="id.attrs", commands=IDENTITY)
ENROLLMENT_PROFILE = Option("enrollment.profile", flag="enrollment.profile", path="enrollment.profile", commands=ENROLL)
ENROLLMENT_LABEL = Option("enrollment.label", flag="enrollment.label", path="enrollment.label", commands=ENROLL)
ENROLLMENT_TYPE = Option("enrollment.type", flag="enrollment.type", path="enrollment.type", commands=ENROLL)
ENROLLMENT_ATTRS = Option("enrollment.attrs", flag="enrollment.attrs", commands=ENROLL)
CSR_CN = Option("csr.cn", flag="csr.cn", path="csr.cn", commands=CSR)
CSR_HOSTS = Option("csr.hosts", flag="csr.hosts", path="csr.hosts", commands=CSR)
CSR_NAMES = Option("csr.names", flag="csr.names", commands=CSR)
CSR_SERIAL = Option("csr.serialnumber", flag="csr.serialnumber", path="csr.serialnumber", commands=CSR)
CSR_KEY_ALGO = Option("csr.keyrequest.algo", flag="csr.keyrequest.algo", path="csr.keyrequest.algo", commands=CSR)
CSR_KEY_SIZE = Option("csr.keyrequest.size", flag="csr.keyrequest.size", path="csr.keyrequest.size", commands=CSR)
CSR_KEY_REUSE = Option(
    "csr.keyrequest.reusekey", flag="csr.keyrequest.reusekey", path="csr.keyrequest.reusekey", commands=CSR
)


def _listed(values: Optional[Sequence[str]]):
    return list(values) if values is not None else None


class FabricCAClientBuilder(CommandBuilder):
    """fabric-ca-client command line."""

    binary = FabricBinary.CA_CLIENT.value
    commands = CAClientCommand
    config_filename = CA_CLIENT_CONFIG

    def set_url(self, url: Optional[str] = None):
        return self._set(URL, url)

    def set_mspdir(self, mspdir: Optional[str] = None):
        return self._set(MSPDIR, mspdir)

    def set_home(self, home: Optional[str] = None):
        return self._set(HOME, home)

    def set_ca_name(self, name: Optional[str] = None):
        return self._set(CA_NAME, name)

    def enable_debug(self, enable: Optional[bool] = None):
        return self._set(DEBUG, enable)

    def set_log_level(self, level: Optional[str] = None):
        return self._set(LOG_LEVEL, level)

    def set_my_host(self, host: Optional[str] = None):
        return self._set(MY_HOST, host)

    def set_idemix_curve(self, curve: Optional[str] = None):
        return self._set(IDEMIX_CURVE, curve)

    def set_tls(
        self,
        certfiles: Optional[Sequence[str]] = None,
        client_certfile: Optional[str] = None,
        client_keyfile: Optional[str] = None,
    ):
        self._set(TLS_CERTFILES, _listed(certfiles))
        self._set(TLS_CLIENT_CERTFILE, client_certfile)
        return self._set(TLS_CLIENT_KEYFILE, client_keyfile)

    def set_identity(
        self,
        name: Optional[str] = None,
        secret: Optional[str] = None,
        id_type: Optional[str] = None,
        affiliation: Optional[str] = None,
        max_enrollments: Optional[int] = None,
        attrs: Optional[str] = None,
    ):
        self._set(ID_NAME, name)
        self._set(ID_SECRET, secret)
        self._set(ID_TYPE, id_type)
        self._set(ID_AFFILIATION, affiliation)
        self._set(ID_MAX_ENROLLMENTS, max_enrollments)
        return self._set(ID_ATTRS, attrs)

    def set_enrollment(
        self,
        profile: Optional[str] = None,
        label: Optional[str] = None,
        enrollment_type: Optional[str] = None,
        attrs: Optional[Sequence[str]] = None,
    ):
        self._set(ENROLLMENT_PROFILE, profile)
        self._set(ENROLLMENT_LABEL, label)
        self._set(ENROLLMENT_TYPE, enrollment_type)
        return self._set(ENROLLMENT_ATTRS, _listed(attrs))

    def set_csr(
        self,
        cn: Optional[str] = None,
        hosts: Optional[Sequence[str]] = None,
        names: Optional[Sequence[str]] = None,
        serialnumber: Optional[str] = None,
        key_algo: Optional[str] = None,
        key_size: Optional[int] = None,
        reuse_key: Optional[bool] = None,
    ):
        self._set(CSR_CN, cn)
        self._set(CSR_HOSTS, _listed(hosts))
        self._set(CSR_NAMES, _listed(names))
        self._set(CSR_SERIAL, serialnumber)
        self._set(CSR_KEY_ALGO, key_algo)
        self._set(CSR_KEY_SIZE, key_size)
        return self._set(CSR_KEY_REUSE, reuse_key)


def rename_keystore_key(mspdir: Union[str, Path], target: str = "key.pem") -> Optional[Path]:
    """
    Rename the single private key fabric-ca-client writes under ``<mspdir>/keystore``.

    Returns the new path, or None when the keystore is empty.
    """
    keystore = Path(mspdir) / "keystore"
    try:
        keys = sorted(p for p in keystore.iterdir() if p.is_file())
    except OSError as e:
        raise ConfigWriteError(f"Cannot read keystore {keystore}: {e}", path=str(keystore)) from e
    if not keys:
        logger.warning(f"No key found in {keystore}")
        return None
    destination = keystore / target
    if keys[0] == destination:
        return destination
    try:
        keys[0].rename(destination)
    except OSError as e:
        raise ConfigWriteError(f"Cannot rename {keys[0]}: {e}", path=str(destination)) from e
    logger.info(f"Renamed {keys[0].name} to {target}")
    return destination
