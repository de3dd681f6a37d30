from .snapshot import build_snapshot, write_snapshot

__all__ = ["build_snapshot", "write_snapshot"]
