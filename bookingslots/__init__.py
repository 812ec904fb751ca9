"""
bookingslots - meeting booking with weekly availability templates.
"""

__version__ = "0.1.0"
