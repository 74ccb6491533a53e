"""Risk monitoring for leveraged DeepBook margin positions on Sui."""

__version__ = "0.1.0"
