"""Builder for configtxgen (genesis blocks and channel artifacts)."""

from typing import Optional

from weaver.command_builder import CommandBuilder
from weaver.fabric.constants import FabricBinary
from weaver.options import Option

AS_ORG = Option("asOrg", flag="asOrg")
BASE_PROFILE = Option("channelCreateTxBaseProfile", flag="channelCreateTxBaseProfile")
CHANNEL_ID = Option("channelID", flag="channelID")
CONFIG_PATH = Option("configPath", flag="configPath")
INSPECT_BLOCK = Option("inspectBlock", flag="inspectBlock")
INSPECT_CHANNEL_TX = Option("inspectChannelCreateTx", flag="inspectChannelCreateTx")
OUTPUT_ANCHOR_PEERS = Option("outputAnchorPeersUpdate", flag="outputAnchorPeersUpdate")
OUTPUT_BLOCK = Option("outputBlock", flag="outputBlock")
OUTPUT_CHANNEL_TX = Option("outputCreateChannelTx", flag="outputCreateChannelTx")
PRINT_ORG = Option("printOrg", flag="printOrg")
PROFILE = Option("profile", flag="profile")
SHOW_VERSION = Option("version", flag="version")


class ConfigtxgenBuilder(CommandBuilder):
    """configtxgen takes no sub-command and single-dash flags."""

    binary = FabricBinary.CONFIGTXGEN.value
    flag_prefix = "-"

    def set_as_org(self, org: Optional[str] = None):
        return self._set(AS_ORG, org)

    def set_channel_create_tx_base_profile(self, profile: Optional[str] = None):
        return self._set(BASE_PROFILE, profile)

    def set_channel_id(self, channel_id: Optional[str] = None):
        return self._set(CHANNEL_ID, channel_id)

    def set_config_path(self, path: Optional[str] = None):
        return self._set(CONFIG_PATH, path)

    def set_inspect_block(self, path: Optional[str] = None):
        return self._set(INSPECT_BLOCK, path)

    def set_inspect_channel_create_tx(self, path: Optional[str] = None):
        return self._set(INSPECT_CHANNEL_TX, path)

    def set_output_anchor_peers_update(self, path: Optional[str] = None):
        return self._set(OUTPUT_ANCHOR_PEERS, path)

    def set_output_block(self, path: Optional[str] = None):
        return self._set(OUTPUT_BLOCK, path)

    def set_output_create_channel_tx(self, path: Optional[str] = None):
        return self._set(OUTPUT_CHANNEL_TX, path)

    def set_print_org(self, org: Optional[str] = None):
        return self._set(PRINT_ORG, org)

    def set_profile(self, profile: Optional[str] = None):
        return self._set(PROFILE, profile)

    def show_version(self, show: Optional[bool] = None):
        return self._set(SHOW_VERSION, show)
