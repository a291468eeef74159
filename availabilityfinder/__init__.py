"""
availabilityfinder - bookable slots and day suggestions from calendar busy times.
"""

__version__ = "0.1.0"
