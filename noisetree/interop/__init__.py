"""
Host interop: opaque tree handles, the bridge entry points and the
HTTP surface over them.
"""

from .bridge import BridgeResult, HostBridge, parse_path
from .handles import TreeHandleTable

__all__ = ["BridgeResult", "HostBridge", "TreeHandleTable", "parse_path"]
