"""Email processing pipeline package"""
from .processor import EmailProcessor
from .scan_logger import ScanLogger

__all__ = ['EmailProcessor', 'ScanLogger']
