"""Airport lookup package"""
from .iata import AirportInfo, is_valid_code, lookup

__all__ = ['AirportInfo', 'is_valid_code', 'lookup']
