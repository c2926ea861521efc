"""
Dashboard Module

Basic-auth gated FastAPI app: statistics page, preview API and run triggers.
"""

from .app import create_app
from .templates import DashboardTemplates

__all__ = ["create_app", "DashboardTemplates"]
