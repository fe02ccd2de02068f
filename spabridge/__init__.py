"""
spabridge - CSV bridge between exam plans and the sp-automatisch scheduler.
"""

__version__ = "0.1.0"
