"""
Critters - Shared
Constants, geometry and event types used across packages.
"""
