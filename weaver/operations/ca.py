"""Certificate authority workflows: issue, start and boot a CA server, enroll clients."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from weaver.fabric import FabricCAClientBuilder, FabricCAServerBuilder, rename_keystore_key
from weaver.fabric.constants import CA_CERT_FILE, CA_SERVER_CONFIG, CAClientCommand, CAServerCommand
from weaver.operations.context import OperationContext
from weaver.process_supervisor import ProcessResult

logger = logging.getLogger("weaver.operations.ca")


def split_user_pass(value: Optional[str]) -> Optional[Dict[str, str]]:
    """``"admin:adminpw"`` -> ``{"name": "admin", "pass": "adminpw"}``."""
    if not value:
        return None
    name, _, password = value.partition(":")
    identity = {"name": name}
    if password:
        identity["pass"] = password
    return identity


@dataclass
class CAServerOptions:
    """Settings for fabric-ca-server; unset fields keep the template value."""
    port: Optional[int] = None
    address: Optional[str] = None
    debug: Optional[bool] = None
    config_version: Optional[str] = None
    log_level: Optional[str] = None
    bootstrap_user: Optional[str] = None
    crl_size: Optional[int] = None
    crl_expiry: Optional[str] = None
    cors_enabled: Optional[bool] = None
    cors_origins: Optional[List[str]] = None
    tls_enabled: Optional[bool] = None
    tls_certfile: Optional[str] = None
    tls_keyfile: Optional[str] = None
    tls_client_type: Optional[str] = None
    tls_client_certfiles: Optional[List[str]] = None
    ca_name: Optional[str] = None
    ca_keyfile: Optional[str] = None
    ca_certfile: Optional[str] = None
    ca_chainfile: Optional[str] = None
    ca_reenroll_ignore_cert_expiry: Optional[bool] = None
    db_type: Optional[str] = None
    db_datasource: Optional[str] = None
    max_enrollments: Optional[int] = None
    csr_cn: Optional[str] = None
    csr_hosts: Optional[List[str]] = None
    csr_key_algo: Optional[str] = None
    csr_key_size: Optional[int] = None
    csr_ca_expiry: Optional[str] = None
    csr_ca_pathlength: Optional[int] = None
    keep_tls_profile: bool = True
    keep_ca_profile: bool = True
    operations_address: Optional[str] = None
    operations_tls_enabled: Optional[bool] = None
    operations_tls_certfile: Optional[str] = None
    operations_tls_keyfile: Optional[str] = None
    metrics_provider: Optional[str] = None
    metrics_statsd_address: Optional[str] = None
    metrics_statsd_network: Optional[str] = None
    metrics_statsd_prefix: Optional[str] = None

    @property
    def identities(self) -> Optional[List[Dict[str, Any]]]:
        identity = split_user_pass(self.bootstrap_user)
        return [identity] if identity else None


def configure_ca_server(builder: FabricCAServerBuilder, opts: CAServerOptions) -> FabricCAServerBuilder:
    """Apply every config-file setting in ``opts`` to ``builder``."""
    return (
        builder
        .set_version(opts.config_version)
        .set_port(opts.port)
        .set_address(opts.address)
        .enable_debug(opts.debug)
        .set_crl_size_limit(opts.crl_size)
        .set_crl_expiry(opts.crl_expiry)
        .set_cors(opts.cors_enabled, opts.cors_origins)
        .set_tls(opts.tls_enabled, opts.tls_certfile, opts.tls_keyfile, opts.tls_client_type, opts.tls_client_certfiles)
        .set_ca(opts.ca_name, opts.ca_keyfile, opts.ca_certfile, opts.ca_chainfile, opts.ca_reenroll_ignore_cert_expiry)
        .set_identities(opts.identities)
        .set_database(opts.db_type, opts.db_datasource)
        .set_max_enrollments(opts.max_enrollments)
        .set_csr(
            opts.csr_cn, opts.csr_hosts, opts.csr_key_algo, opts.csr_key_size,
            opts.csr_ca_expiry, opts.csr_ca_pathlength,
        )
        .remove_unused_profiles(keep_tls=opts.keep_tls_profile, keep_ca=opts.keep_ca_profile)
        .set_operations(
            opts.operations_address, opts.operations_tls_enabled,
            opts.operations_tls_certfile, opts.operations_tls_keyfile,
        )
        .set_metrics(
            opts.metrics_provider, opts.metrics_statsd_address,
            opts.metrics_statsd_network, opts.metrics_statsd_prefix,
        )
    )


def issue_ca(ctx: OperationContext, home: Union[str, Path], opts: CAServerOptions) -> Path:
    """Write ``fabric-ca-server-config.yaml`` into ``home``."""
    logger.info(f"Issuing CA server config in {home}")
    builder = FabricCAServerBuilder(ctx.template(CA_SERVER_CONFIG), ctx.supervisor)
    configure_ca_server(builder, opts).save(home)
    return builder.config().resolve_destination(home)


async def start_ca(
    ctx: OperationContext,
    home: Union[str, Path],
    opts: CAServerOptions,
    wait_for_ready: bool = True,
) -> ProcessResult:
    """Run ``fabric-ca-server start`` from ``home`` and wait until it listens."""
    logger.info(f"Starting CA server from {home}")
    builder = (
        FabricCAServerBuilder(supervisor=ctx.supervisor)
        .set_command(CAServerCommand.START)
        .set_home(str(home))
        .set_port(opts.port)
        .enable_debug(opts.debug)
        .set_log_level(opts.log_level)
        .set_bootstrap_admin(opts.bootstrap_user)
        .set_ca_name(opts.ca_name)
    )
    return await builder.execute(wait_for_ready=wait_for_ready, cancel=ctx.cancel)


def has_ca_initialized(location: Union[str, Path]) -> bool:
    """True once the CA certificate exists; ``location`` is the file or its directory."""
    path = Path(location)
    if path.suffix != ".pem":
        path = path / CA_CERT_FILE
    booted = path.exists()
    logger.debug(f"CA initialized ({path}): {booted}")
    return booted


async def boot_ca(
    ctx: OperationContext,
    home: Union[str, Path],
    opts: CAServerOptions,
    boot_file: Optional[Union[str, Path]] = None,
) -> ProcessResult:
    """Issue the config unless the CA already holds a certificate, then start it."""
    if has_ca_initialized(boot_file or home):
        logger.info("CA already initialized, skipping config")
    else:
        issue_ca(ctx, home, opts)
    return await start_ca(ctx, home, opts)


@dataclass
class EnrollmentOptions:
    """Arguments for one fabric-ca-client invocation."""
    command: str = CAClientCommand.ENROLL.value
    url: Optional[str] = None
    home: Optional[str] = None
    mspdir: Optional[str] = None
    ca_name: Optional[str] = None
    debug: Optional[bool] = None
    log_level: Optional[str] = None
    my_host: Optional[str] = None
    idemix_curve: Optional[str] = None
    tls_certfiles: Optional[List[str]] = None
    tls_client_certfile: Optional[str] = None
    tls_client_keyfile: Optional[str] = None
    id_name: Optional[str] = None
    id_secret: Optional[str] = None
    id_type: Optional[str] = None
    id_affiliation: Optional[str] = None
    id_max_enrollments: Optional[int] = None
    id_attrs: Optional[str] = None
    enrollment_profile: Optional[str] = None
    enrollment_label: Optional[str] = None
    enrollment_type: Optional[str] = None
    enrollment_attrs: Optional[List[str]] = None
    csr_cn: Optional[str] = None
    csr_hosts: Optional[List[str]] = None
    csr_names: Optional[List[str]] = None
    csr_serialnumber: Optional[str] = None
    csr_key_algo: Optional[str] = None
    csr_key_size: Optional[int] = None
    csr_reuse_key: Optional[bool] = None
    rename_key: bool = False


def build_client_command(ctx: OperationContext, opts: EnrollmentOptions) -> FabricCAClientBuilder:
    builder = (
        FabricCAClientBuilder(supervisor=ctx.supervisor)
        .set_command(opts.command)
        .set_url(opts.url)
        .set_home(opts.home)
        .set_mspdir(opts.mspdir)
        .set_ca_name(opts.ca_name)
        .enable_debug(opts.debug)
        .set_log_level(opts.log_level)
        .set_my_host(opts.my_host)
        .set_idemix_curve(opts.idemix_curve)
        .set_tls(opts.tls_certfiles, opts.tls_client_certfile, opts.tls_client_keyfile)
    )
    builder.set_identity(
        opts.id_name, opts.id_secret, opts.id_type, opts.id_affiliation,
        opts.id_max_enrollments, opts.id_attrs,
    )
    builder.set_enrollment(opts.enrollment_profile, opts.enrollment_label, opts.enrollment_type, opts.enrollment_attrs)
    builder.set_csr(
        opts.csr_cn, opts.csr_hosts, opts.csr_names, opts.csr_serialnumber,
        opts.csr_key_algo, opts.csr_key_size, opts.csr_reuse_key,
    )
    return builder


async def client_enrollment(ctx: OperationContext, opts: EnrollmentOptions) -> ProcessResult:
    """
    Run fabric-ca-client ``opts.command``.

    With ``rename_key`` the generated private key under ``<mspdir>/keystore``
    is renamed to ``key.pem`` afterwards.
    """
    builder = build_client_command(ctx, opts)
    logger.info(f"Running fabric-ca-client {opts.command}")
    result = await builder.execute(cancel=ctx.cancel)
    if opts.rename_key:
        mspdir = Path(opts.mspdir or "msp")
        if opts.home and not mspdir.is_absolute():
            mspdir = Path(opts.home) / mspdir
        rename_keystore_key(mspdir)
    return result
