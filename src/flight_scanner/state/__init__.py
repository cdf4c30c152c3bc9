"""SQLite storage for users, flights and scan history"""
from .database import init_database
from .state_manager import StateManager

__all__ = ['init_database', 'StateManager']
