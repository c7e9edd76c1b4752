"""CA sub-commands: issue-ca, start-ca, boot-ca, client-enrollment, node-ou."""

from __future__ import annotations

import argparse

from weaver.fabric import write_node_ou
from weaver.fabric.constants import CAClientCommand, ClientAuthType
from weaver.operations import (
    CAServerOptions,
    EnrollmentOptions,
    OperationContext,
    boot_ca,
    client_enrollment,
    issue_ca,
    start_ca,
)
from weaver_cli.common import add_flag, csv_list, print_status, serve_until_exit


def _add_server_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--home", default=".", help="CA server home directory.")
    parser.add_argument("--config-version", help="Config file version.")
    parser.add_argument("--port", type=int, help="Listening port.")
    parser.add_argument("--address", help="Listening address.")
    add_flag(parser, "--server-debug", help="Run fabric-ca-server with --debug.")
    parser.add_argument("--log-level", help="fabric-ca-server log level.")
    parser.add_argument("--bootstrap-users", metavar="USER:PASSWORD", help="Bootstrap admin identity.")
    parser.add_argument("--crl-size", type=int, help="CRL size limit in bytes.")
    parser.add_argument("--crl-expiry", help="CRL expiry, e.g. 24h.")
    add_flag(parser, "--cors-enabled", help="Enable CORS.")
    parser.add_argument("--cors-origins", type=csv_list, help="Allowed CORS origins (CSV).")
    add_flag(parser, "--tls-enabled", help="Enable TLS.")
    parser.add_argument("--tls-certfile")
    parser.add_argument("--tls-keyfile")
    parser.add_argument("--tls-client-type", choices=[c.value for c in ClientAuthType])
    parser.add_argument("--tls-client-certfiles", type=csv_list)
    parser.add_argument("--ca-name")
    parser.add_argument("--ca-keyfile")
    parser.add_argument("--ca-certfile")
    parser.add_argument("--ca-chainfile")
    add_flag(parser, "--ca-reenroll-ignore-cert-expiry")
    parser.add_argument("--db-type")
    parser.add_argument("--db-datasource")
    parser.add_argument("--max-enrollments", type=int)
    parser.add_argument("--csr-cn")
    parser.add_argument("--csr-hosts", type=csv_list)
    parser.add_argument("--csr-keyrequest-algo")
    parser.add_argument("--csr-keyrequest-size", type=int)
    parser.add_argument("--csr-ca-expiry")
    parser.add_argument("--csr-ca-pathlength", type=int)
    parser.add_argument("--no-tls-profile", action="store_true", help="Drop the tls signing profile.")
    parser.add_argument("--no-ca-profile", action="store_true", help="Drop the ca signing profile.")
    parser.add_argument("--operations-listen-address")
    add_flag(parser, "--operations-tls-enabled")
    parser.add_argument("--operations-tls-certfile")
    parser.add_argument("--operations-tls-keyfile")
    parser.add_argument("--metrics-provider")
    parser.add_argument("--metrics-statsd-address")
    parser.add_argument("--metrics-statsd-network")
    parser.add_argument("--metrics-statsd-prefix")


def server_options(args: argparse.Namespace) -> CAServerOptions:
    return CAServerOptions(
        port=args.port,
        address=args.address,
        debug=args.server_debug,
        config_version=args.config_version,
        log_level=args.log_level,
        bootstrap_user=args.bootstrap_users,
        crl_size=args.crl_size,
        crl_expiry=args.crl_expiry,
        cors_enabled=args.cors_enabled,
        cors_origins=args.cors_origins,
        tls_enabled=args.tls_enabled,
        tls_certfile=args.tls_certfile,
        tls_keyfile=args.tls_keyfile,
        tls_client_type=args.tls_client_type,
        tls_client_certfiles=args.tls_client_certfiles,
        ca_name=args.ca_name,
        ca_keyfile=args.ca_keyfile,
        ca_certfile=args.ca_certfile,
        ca_chainfile=args.ca_chainfile,
        ca_reenroll_ignore_cert_expiry=args.ca_reenroll_ignore_cert_expiry,
        db_type=args.db_type,
        db_datasource=args.db_datasource,
        max_enrollments=args.max_enrollments,
        csr_cn=args.csr_cn,
        csr_hosts=args.csr_hosts,
        csr_key_algo=args.csr_keyrequest_algo,
        csr_key_size=args.csr_keyrequest_size,
        csr_ca_expiry=args.csr_ca_expiry,
        csr_ca_pathlength=args.csr_ca_pathlength,
        keep_tls_profile=not args.no_tls_profile,
        keep_ca_profile=not args.no_ca_profile,
        operations_address=args.operations_listen_address,
        operations_tls_enabled=args.operations_tls_enabled,
        operations_tls_certfile=args.operations_tls_certfile,
        operations_tls_keyfile=args.operations_tls_keyfile,
        metrics_provider=args.metrics_provider,
        metrics_statsd_address=args.metrics_statsd_address,
        metrics_statsd_network=args.metrics_statsd_network,
        metrics_statsd_prefix=args.metrics_statsd_prefix,
    )


async def cmd_issue_ca(args: argparse.Namespace, ctx: OperationContext) -> int:
    path = issue_ca(ctx, args.home, server_options(args))
    print_status("OK", f"CA server config written to {path}")
    return 0


async def cmd_start_ca(args: argparse.Namespace, ctx: OperationContext) -> int:
    result = await start_ca(ctx, args.home, server_options(args))
    return await serve_until_exit(ctx, result, "fabric-ca-server")


async def cmd_boot_ca(args: argparse.Namespace, ctx: OperationContext) -> int:
    result = await boot_ca(ctx, args.home, server_options(args), boot_file=args.boot_file)
    return await serve_until_exit(ctx, result, "fabric-ca-server")


async def cmd_client_enrollment(args: argparse.Namespace, ctx: OperationContext) -> int:
    opts = EnrollmentOptions(
        command=args.client_command,
        url=args.url,
        home=args.home,
        mspdir=args.mspdir,
        ca_name=args.ca_name,
        debug=args.client_debug,
        my_host=args.my_host,
        idemix_curve=args.idemix_curve,
        tls_certfiles=args.tls_certfiles,
        tls_client_certfile=args.tls_client_certfile,
        tls_client_keyfile=args.tls_client_keyfile,
        id_name=args.id_name,
        id_secret=args.id_secret,
        id_type=args.id_type,
        id_affiliation=args.id_affiliation,
        id_max_enrollments=args.id_maxenrollments,
        id_attrs=args.id_attrs,
        enrollment_profile=args.enrollment_profile,
        enrollment_label=args.enrollment_label,
        enrollment_type=args.enrollment_type,
        enrollment_attrs=args.enrollment_attrs,
        csr_cn=args.csr_cn,
        csr_hosts=args.csr_hosts,
        csr_names=args.csr_names,
        csr_serialnumber=args.csr_serialnumber,
        csr_key_algo=args.csr_keyrequest_algo,
        csr_key_size=args.csr_keyrequest_size,
        csr_reuse_key=args.csr_keyrequest_reusekey,
        rename_key=args.rename_key,
    )
    await client_enrollment(ctx, opts)
    print_status("OK", f"fabric-ca-client {args.client_command} completed")
    return 0


async def cmd_node_ou(args: argparse.Namespace, ctx: OperationContext) -> int:
    path = write_node_ou(args.mspdir, enable=args.enable, path_from_mspdir=args.path, cert=args.cert)
    print_status("OK", f"NodeOU config written to {path}")
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    issue = subparsers.add_parser("issue-ca", help="Write a fabric-ca-server config.")
    _add_server_arguments(issue)
    issue.set_defaults(func=cmd_issue_ca)

    start = subparsers.add_parser("start-ca", help="Start fabric-ca-server and wait until it listens.")
    _add_server_arguments(start)
    start.set_defaults(func=cmd_start_ca)

    boot = subparsers.add_parser("boot-ca", help="Issue the CA config if needed, then start it.")
    _add_server_arguments(boot)
    boot.add_argument("--boot-file", help="File whose presence means the CA is initialized.")
    boot.set_defaults(func=cmd_boot_ca)

    client = subparsers.add_parser("client-enrollment", help="Run a fabric-ca-client command.")
    client.add_argument(
        "--command", dest="client_command", default=CAClientCommand.ENROLL.value,
        choices=[c.value for c in CAClientCommand],
    )
    client.add_argument("--url")
    client.add_argument("--home")
    client.add_argument("--mspdir")
    client.add_argument("--ca-name")
    add_flag(client, "--client-debug", help="Run fabric-ca-client with --debug.")
    client.add_argument("--my-host")
    client.add_argument("--idemix-curve")
    client.add_argument("--tls-certfiles", type=csv_list)
    client.add_argument("--tls-client-certfile")
    client.add_argument("--tls-client-keyfile")
    client.add_argument("--id-name")
    client.add_argument("--id-secret")
    client.add_argument("--id-type")
    client.add_argument("--id-affiliation")
    client.add_argument("--id-maxenrollments", type=int)
    client.add_argument("--id-attrs")
    client.add_argument("--enrollment-profile")
    client.add_argument("--enrollment-label")
    client.add_argument("--enrollment-type")
    client.add_argument("--enrollment-attrs", type=csv_list)
    client.add_argument("--csr-cn")
    client.add_argument("--csr-hosts", type=csv_list)
    client.add_argument("--csr-names", type=csv_list)
    client.add_argument("--csr-serialnumber")
    client.add_argument("--csr-keyrequest-algo")
    client.add_argument("--csr-keyrequest-size", type=int)
    add_flag(client, "--csr-keyrequest-reusekey")
    client.add_argument("--rename-key", action="store_true", help="Rename the keystore key to key.pem.")
    client.set_defaults(func=cmd_client_enrollment)

    node_ou = subparsers.add_parser("node-ou", help="Write the NodeOU config.yaml into an MSP directory.")
    node_ou.add_argument("--enable", action="store_true", help="Enable NodeOU classification.")
    node_ou.add_argument("--path", default="cacerts", help="Certificate directory relative to the MSP.")
    node_ou.add_argument("--mspdir", default="msp")
    node_ou.add_argument("--cert", help="CA certificate file name (default: first file in cacerts).")
    node_ou.set_defaults(func=cmd_node_ou)
