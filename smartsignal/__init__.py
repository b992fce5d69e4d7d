"""
SmartSignal

Technical-analysis indicators and confluence-scored trading signals.
"""

__version__ = "0.1.0"
