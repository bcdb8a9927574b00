"""
Smart Home Energy Management Service

FastAPI backend for household device control with role-based access and
cumulative energy accounting per device.
"""

__version__ = "1.0.0"
__author__ = "Smart Home Energy Team"
__description__ = "Device registry and energy accounting for smart homes"
