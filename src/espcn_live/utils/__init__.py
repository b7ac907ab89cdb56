"""Utility modules for espcn-live."""
