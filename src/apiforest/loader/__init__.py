from .snapshot_loader import SnapshotError, SnapshotLoader

__all__ = ["SnapshotError", "SnapshotLoader"]
