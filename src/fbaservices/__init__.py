"""fbaModelServices client scripts, records and JSON-RPC server scaffold."""

__all__ = [
    "cli",
]
