"""Builder for fabric-ca-server and its fabric-ca-server-config.yaml."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from weaver.command_builder import CommandBuilder
from weaver.fabric.constants import (
    CA_READY_PATTERN,
    CA_SERVER_CONFIG,
    CAServerCommand,
    ClientAuthType,
    FabricBinary,
    FabricLogLevel,
)
from weaver.options import Option

SERVER_COMMANDS = (CAServerCommand.INIT, CAServerCommand.START)

VERSION = Option("version", path="version")
PORT = Option("port", flag="port", path="port")
ADDRESS = Option("address", flag="address", path="address")
DEBUG = Option("debug", flag="debug", path="debug")
HOME = Option("home", flag="home")
LOG_LEVEL = Option("loglevel", flag="loglevel", path="loglevel")
BOOT = Option("boot", flag="boot", commands=SERVER_COMMANDS)
CA_COUNT = Option("cacount", flag="cacount", path="cacount")
CA_FILES = Option("cafiles", flag="cafiles", path="cafiles")
CRL_SIZE_LIMIT = Option("crlsizelimit", flag="crlsizelimit", path="crlsizelimit")
CRL_EXPIRY = Option("crl.expiry", flag="crl.expiry", path="crl.expiry")
CORS_ENABLED = Option("cors.enabled", flag="cors.enabled", path="cors.enabled")
CORS_ORIGINS = Option("cors.origins", flag="cors.origins", path="cors.origins")
TLS_ENABLED = Option("tls.enabled", flag="tls.enabled", path="tls.enabled")
TLS_CERTFILE = Option("tls.certfile", flag="tls.certfile", path="tls.certfile")
TLS_KEYFILE = Option("tls.keyfile", flag="tls.keyfile", path="tls.keyfile")
TLS_CLIENT_TYPE = Option("tls.clientauth.type", flag="tls.clientauth.type", path="tls.clientauth.type")
TLS_CLIENT_CERTFILES = Option(
    "tls.clientauth.certfiles", flag="tls.clientauth.certfiles", path="tls.clientauth.certfiles"
)
CA_NAME = Option("ca.name", flag="ca.name", path="ca.name")
CA_KEYFILE = Option("ca.keyfile", flag="ca.keyfile", path="ca.keyfile")
CA_CERTFILE = Option("ca.certfile", flag="ca.certfile", path="ca.certfile")
CA_CHAINFILE = Option("ca.chainfile", flag="ca.chainfile", path="ca.chainfile")
CA_REENROLL_IGNORE_EXPIRY = Option(
    "ca.reenrollignorecertexpiry", flag="ca.reenrollignorecertexpiry", path="ca.reenrollignorecertexpiry"
)
MAX_ENROLLMENTS = Option("registry.maxenrollments", flag="registry.maxenrollments", path="registry.maxenrollments")
IDENTITIES = Option("registry.identities", path="registry.identities")
PASSWORD_ATTEMPTS = Option(
    "cfg.identities.passwordattempts", flag="cfg.identities.passwordattempts",
    path="cfg.identities.passwordattempts",
)
DB_TYPE = Option("db.type", flag="db.type", path="db.type")
DB_DATASOURCE = Option("db.datasource", flag="db.datasource", path="db.datasource")
CSR_CN = Option("csr.cn", flag="csr.cn", path="csr.cn")
CSR_HOSTS = Option("csr.hosts", flag="csr.hosts", path="csr.hosts")
CSR_KEY_ALGO = Option("csr.keyrequest.algo", flag="csr.keyrequest.algo", path="csr.keyrequest.algo")
CSR_KEY_SIZE = Option("csr.keyrequest.size", flag="csr.keyrequest.size", path="csr.keyrequest.size")
CSR_CA_EXPIRY = Option("csr.ca.expiry", path="csr.ca.expiry")
CSR_CA_PATHLENGTH = Option("csr.ca.pathlength", path="csr.ca.pathlength")
SIGNING_DEFAULT_EXPIRY = Option("signing.default.expiry", path="signing.default.expiry")
SIGNING_DEFAULT_USAGE = Option("signing.default.usage", path="signing.default.usage")
OPERATIONS_ADDRESS = Option("operations.listenAddress", path="operations.listenAddress")
OPERATIONS_TLS_ENABLED = Option("operations.tls.enabled", path="operations.tls.enabled")
OPERATIONS_TLS_CERTFILE = Option("operations.tls.cert.file", path="operations.tls.cert.file")
OPERATIONS_TLS_KEYFILE = Option("operations.tls.key.file", path="operations.tls.key.file")
METRICS_PROVIDER = Option("metrics.provider", path="metrics.provider")
METRICS_STATSD_ADDRESS = Option("metrics.statsd.address", path="metrics.statsd.address")
METRICS_STATSD_NETWORK = Option("metrics.statsd.network", path="metrics.statsd.network")
METRICS_STATSD_PREFIX = Option("metrics.statsd.prefix", path="metrics.statsd.prefix")


class FabricCAServerBuilder(CommandBuilder):
    """
    fabric-ca-server command line and config file.

    Example:
        FabricCAServerBuilder().set_command("start").set_port(7054).build()
        -> ["fabric-ca-server", "start", "--port", "7054"]
    """

    binary = FabricBinary.CA_SERVER.value
    commands = CAServerCommand
    config_filename = CA_SERVER_CONFIG
    ready_pattern = CA_READY_PATTERN

    def set_version(self, version: Optional[str] = None):
        return self._set(VERSION, version)

    def set_port(self, port: Optional[int] = None):
        return self._set(PORT, port)

    def set_address(self, address: Optional[str] = None):
        return self._set(ADDRESS, address)

    def enable_debug(self, enable: Optional[bool] = None):
        return self._set(DEBUG, enable)

    def set_home(self, home: Optional[str] = None):
        return self._set(HOME, home)

    def set_log_level(self, level: Optional[str] = None):
        if level is not None:
            level = FabricLogLevel(level.lower() if isinstance(level, str) else level)
        return self._set(LOG_LEVEL, level)

    def set_bootstrap_admin(self, user_pass: Optional[str] = None):
        return self._set(BOOT, user_pass)

    def set_ca_count(self, count: Optional[int] = None):
        return self._set(CA_COUNT, count)

    def set_ca_files(self, files: Optional[Sequence[str]] = None):
        return self._set(CA_FILES, list(files) if files is not None else None)

    def set_crl_size_limit(self, limit: Optional[int] = None):
        return self._set(CRL_SIZE_LIMIT, limit)

    def set_crl_expiry(self, expiry: Optional[str] = None):
        return self._set(CRL_EXPIRY, expiry)

    def set_cors(self, enabled: Optional[bool] = None, origins: Optional[Sequence[str]] = None):
        self._set(CORS_ENABLED, enabled)
        return self._set(CORS_ORIGINS, list(origins) if origins is not None else None)

    def set_tls(
        self,
        enabled: Optional[bool] = None,
        certfile: Optional[str] = None,
        keyfile: Optional[str] = None,
        client_auth_type: Optional[str] = None,
        client_certfiles: Optional[Sequence[str]] = None,
    ):
        if client_auth_type is not None:
            client_auth_type = ClientAuthType(client_auth_type)
        self._set(TLS_ENABLED, enabled)
        self._set(TLS_CERTFILE, certfile)
        self._set(TLS_KEYFILE, keyfile)
        self._set(TLS_CLIENT_TYPE, client_auth_type)
        return self._set(TLS_CLIENT_CERTFILES, list(client_certfiles) if client_certfiles is not None else None)

    def set_ca(
        self,
        name: Optional[str] = None,
        keyfile: Optional[str] = None,
        certfile: Optional[str] = None,
        chainfile: Optional[str] = None,
        reenroll_ignore_cert_expiry: Optional[bool] = None,
    ):
        self._set(CA_NAME, name)
        self._set(CA_KEYFILE, keyfile)
        self._set(CA_CERTFILE, certfile)
        self._set(CA_CHAINFILE, chainfile)
        return self._set(CA_REENROLL_IGNORE_EXPIRY, reenroll_ignore_cert_expiry)

    def set_ca_name(self, name: Optional[str] = None):
        return self._set(CA_NAME, name)

    def set_max_enrollments(self, count: Optional[int] = None):
        return self._set(MAX_ENROLLMENTS, count)

    def set_password_attempts(self, attempts: Optional[int] = None):
        return self._set(PASSWORD_ATTEMPTS, attempts)

    def set_identities(self, identities: Optional[Sequence[Mapping[str, Any]]] = None):
        """
        Replace the registry identities.

        Each entry is laid over the template's first identity, so fields the
        caller omits keep their template defaults.
        """
        if identities is None:
            return self
        base_list = self._base.get_path("registry.identities") or [{}]
        base = dict(base_list[0]) if base_list else {}
        merged: List[Dict[str, Any]] = []
        for entry in identities:
            identity = dict(base)
            for key, value in entry.items():
                if value is None:
                    continue
                if key == "attrs" and isinstance(value, Mapping):
                    attrs = dict(identity.get("attrs") or {})
                    attrs.update({k: v for k, v in value.items() if v is not None})
                    value = attrs
                identity[key] = value
            merged.append(identity)
        return self._set(IDENTITIES, merged)

    def set_database(self, db_type: Optional[str] = None, datasource: Optional[str] = None):
        self._set(DB_TYPE, db_type)
        return self._set(DB_DATASOURCE, datasource)

    def set_csr(
        self,
        cn: Optional[str] = None,
        hosts: Optional[Sequence[str]] = None,
        key_algo: Optional[str] = None,
        key_size: Optional[int] = None,
        ca_expiry: Optional[str] = None,
        ca_pathlength: Optional[int] = None,
    ):
        self._set(CSR_CN, cn)
        self._set(CSR_HOSTS, list(dict.fromkeys(hosts)) if hosts is not None else None)
        self._set(CSR_KEY_ALGO, key_algo)
        self._set(CSR_KEY_SIZE, key_size)
        self._set(CSR_CA_EXPIRY, ca_expiry)
        return self._set(CSR_CA_PATHLENGTH, ca_pathlength)

    def set_signing_default(self, expiry: Optional[str] = None, usage: Optional[Sequence[str]] = None):
        self._set(SIGNING_DEFAULT_EXPIRY, expiry)
        return self._set(SIGNING_DEFAULT_USAGE, list(usage) if usage is not None else None)

    def remove_unused_profiles(self, keep_tls: bool = True, keep_ca: bool = True):
        """Drop signing profiles the deployment does not issue."""
        if not keep_tls:
            self.remove_config_field("signing.profiles.tls")
        if not keep_ca:
            self.remove_config_field("signing.profiles.ca")
        return self

    def set_operations(
        self,
        listen_address: Optional[str] = None,
        tls_enabled: Optional[bool] = None,
        tls_certfile: Optional[str] = None,
        tls_keyfile: Optional[str] = None,
    ):
        self._set(OPERATIONS_ADDRESS, listen_address)
        self._set(OPERATIONS_TLS_ENABLED, tls_enabled)
        self._set(OPERATIONS_TLS_CERTFILE, tls_certfile)
        return self._set(OPERATIONS_TLS_KEYFILE, tls_keyfile)

    def set_metrics(
        self,
        provider: Optional[str] = None,
        statsd_address: Optional[str] = None,
        statsd_network: Optional[str] = None,
        statsd_prefix: Optional[str] = None,
    ):
        self._set(METRICS_PROVIDER, provider)
        self._set(METRICS_STATSD_ADDRESS, statsd_address)
        self._set(METRICS_STATSD_NETWORK, statsd_network)
        return self._set(METRICS_STATSD_PREFIX, statsd_prefix)
