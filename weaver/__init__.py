"""
weaver: configuration and process orchestration for Hyperledger Fabric nodes.

Builders turn typed settings into config files and command lines for the
Fabric binaries; operations compose them into issue/start/boot workflows.
"""

__version__ = "0.1.0"
