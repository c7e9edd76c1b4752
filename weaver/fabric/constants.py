"""Binary names, command enums and canonical file names for Fabric tools."""

from enum import Enum


class FabricBinary(str, Enum):
    CA_SERVER = "fabric-ca-server"
    CA_CLIENT = "fabric-ca-client"
    ORDERER = "orderer"
    OSN_ADMIN = "osnadmin"
    PEER = "peer"
    CONFIGTXGEN = "configtxgen"
    CONFIGTXLATOR = "configtxlator"


class CAServerCommand(str, Enum):
    INIT = "init"
    START = "start"
    VERSION = "version"
    HELP = "help"


class CAClientCommand(str, Enum):
    AFFILIATION = "affiliation"
    CERTIFICATE = "certificate"
    ENROLL = "enroll"
    GENCRL = "gencrl"
    GENCSR = "gencsr"
    GETCAINFO = "getcainfo"
    IDENTITY = "identity"
    REENROLL = "reenroll"
    REGISTER = "register"
    REVOKE = "revoke"
    VERSION = "version"


class OrdererCommand(str, Enum):
    START = "start"
    VERSION = "version"


class OSNAdminCommand(str, Enum):
    JOIN = "join"
    LIST = "list"
    REMOVE = "remove"


class PeerNodeCommand(str, Enum):
    PAUSE = "pause"
    REBUILD_DBS = "rebuild-dbs"
    RESET = "reset"
    RESUME = "resume"
    ROLLBACK = "rollback"
    START = "start"
    UNJOIN = "unjoin"
    UPGRADE_DBS = "upgrade-dbs"


class PeerChannelCommand(str, Enum):
    CREATE = "create"
    FETCH = "fetch"
    GETINFO = "getinfo"
    JOIN = "join"
    JOINBYSNAPSHOT = "joinbysnapshot"
    LIST = "list"
    SIGNCONFIGTX = "signconfigtx"
    UPDATE = "update"


class LifecycleCommand(str, Enum):
    PACKAGE = "package"
    INSTALL = "install"
    QUERYINSTALLED = "queryinstalled"
    GETINSTALLEDPACKAGE = "getinstalledpackage"
    CALCULATEPACKAGEID = "calculatepackageid"
    APPROVEFORMYORG = "approveformyorg"
    QUERYAPPROVED = "queryapproved"
    CHECKCOMMITREADINESS = "checkcommitreadiness"
    COMMIT = "commit"
    QUERYCOMMITTED = "querycommitted"


class ConfigtxlatorCommand(str, Enum):
    START = "start"
    PROTO_ENCODE = "proto_encode"
    PROTO_DECODE = "proto_decode"
    PROTO_COMPARE = "proto_compare"
    COMPUTE_UPDATE = "compute_update"
    VERSION = "version"


class ConfigtxlatorProtoMessage(str, Enum):
    BLOCK = "common.Block"
    BLOCK_DATA = "common.BlockData"
    BLOCK_METADATA = "common.BlockMetadata"
    CONFIG = "common.Config"
    CONFIG_ENVELOPE = "common.ConfigEnvelope"
    CONFIG_UPDATE = "common.ConfigUpdate"
    CONFIG_UPDATE_ENVELOPE = "common.ConfigUpdateEnvelope"
    ENVELOPE = "common.Envelope"
    SIGNED_ENVELOPE = "common.SignedEnvelope"
    CHAINCODE_DEFINITION = "peer.ChaincodeDefinition"


class ClientAuthType(str, Enum):
    NO_CLIENT_CERT = "noclientcert"
    REQUEST_CLIENT_CERT = "requestclientcert"
    REQUIRE_ANY_CLIENT_CERT = "requireanyclientcert"
    VERIFY_CLIENT_CERT_IF_GIVEN = "verifyclientcertifgiven"
    REQUIRE_AND_VERIFY_CLIENT_CERT = "requireandverifyclientcert"


class FabricLogLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    DEBUG = "debug"
    ERROR = "error"
    FATAL = "fatal"
    CRITICAL = "critical"


CA_SERVER_CONFIG = "fabric-ca-server-config.yaml"
CA_CLIENT_CONFIG = "fabric-ca-client-config.yaml"
ORDERER_CONFIG = "orderer.yaml"
PEER_CONFIG = "core.yaml"
CONFIGTX_CONFIG = "configtx.yaml"
NODE_OU_CONFIG = "config.yaml"

CA_CERT_FILE = "ca-cert.pem"

CA_READY_PATTERN = r"\[\s*INFO\s*\] Listening on http"
ORDERER_READY_PATTERN = r"Beginning to serve requests"
PEER_READY_PATTERN = r"Started peer with ID"
CONFIGTXLATOR_READY_PATTERN = r"Serving HTTP requests on"

# environment variables read by the Fabric binaries themselves
FABRIC_CFG_PATH = "FABRIC_CFG_PATH"
ORDERER_YAML_FILE = "ORDERER_YAML_FILE"
