"""
Builder for configtxlator.

``start`` runs the REST translation server; the other commands convert
between protobuf and JSON or compute a config update between two
configs, reading and writing files.
"""

from typing import Optional, Sequence

from weaver.command_builder import CommandBuilder
from weaver.fabric.constants import CONFIGTXLATOR_READY_PATTERN, ConfigtxlatorCommand, FabricBinary
from weaver.options import Option

C = ConfigtxlatorCommand
PROTO = (C.PROTO_ENCODE, C.PROTO_DECODE)
COMPARISON = (C.PROTO_COMPARE, C.COMPUTE_UPDATE)

HOSTNAME = Option("hostname", flag="hostname", commands=(C.START,))
PORT = Option("port", flag="port", commands=(C.START,))
MESSAGE_TYPE = Option("type", flag="type", commands=PROTO)
INPUT = Option("input", flag="input", commands=PROTO)
ORIGINAL = Option("original", flag="original", commands=COMPARISON)
UPDATED = Option("updated", flag="updated", commands=COMPARISON)
CHANNEL_ID = Option("channel_id", flag="channel_id", commands=(C.COMPUTE_UPDATE,))
OUTPUT = Option("output", flag="output", commands=PROTO + COMPARISON)


class ConfigtxlatorBuilder(CommandBuilder):
    binary = FabricBinary.CONFIGTXLATOR.value
    commands = ConfigtxlatorCommand
    ready_pattern = CONFIGTXLATOR_READY_PATTERN

    def set_hostname(self, hostname: Optional[str] = None):
        return self._set(HOSTNAME, hostname)

    def set_port(self, port: Optional[int] = None):
        return self._set(PORT, port)

    def set_cors(self, origins: Optional[Sequence[str]] = None):
        """Allowed CORS origins, one ``--CORS`` per origin."""
        if origins is None:
            return self
        self.assert_command(C.START)
        return self.add_repeated([("CORS", origin) for origin in origins])

    def set_type(self, message_type=None):
        """Protobuf message name, e.g. ``common.Block``."""
        return self._set(MESSAGE_TYPE, message_type)

    def set_input(self, path: Optional[str] = None):
        return self._set(INPUT, path)

    def set_output(self, path: Optional[str] = None):
        return self._set(OUTPUT, path)

    def set_original(self, path: Optional[str] = None):
        return self._set(ORIGINAL, path)

    def set_updated(self, path: Optional[str] = None):
        return self._set(UPDATED, path)

    def set_channel_id(self, channel_id: Optional[str] = None):
        return self._set(CHANNEL_ID, channel_id)
