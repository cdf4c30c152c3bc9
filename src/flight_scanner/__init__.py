"""Scan a Gmail archive for flight bookings and store them as structured records"""

__version__ = '0.1.0'
