"""
Transfers Module

HCB API client for moving money between organizations.
"""

from .hcb_client import HCBClient, to_cents

__all__ = ["HCBClient", "to_cents"]
