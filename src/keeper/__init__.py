"""Keeper: generic async CRUD services and pagination on top of SQLAlchemy."""

__version__ = "0.1.0"
