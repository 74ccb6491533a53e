"""Protocol interfaces for the margin monitor's external collaborators."""
from .action_handler import ActionHandler
from .chain import ChainClient
from .notifier import Notifier
from .price_oracle import PriceOracle
from .snapshot_source import SnapshotSource

__all__ = ["ActionHandler", "ChainClient", "Notifier", "PriceOracle", "SnapshotSource"]
