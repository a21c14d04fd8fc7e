"""
Reservation Service
Tool lending reservation lifecycle and availability engine.
"""

from src.api.main import create_app, init_database

__all__ = ['create_app', 'init_database']
