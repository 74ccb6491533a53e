"""Service modules"""
from .actions import AlertActionHandler, LoggingActionHandler
from .monitor import ManagerResult, Monitor

__all__ = ["AlertActionHandler", "LoggingActionHandler", "ManagerResult", "Monitor"]
