# app/routers/__init__.py
from . import inventory

__all__ = ["inventory"]
