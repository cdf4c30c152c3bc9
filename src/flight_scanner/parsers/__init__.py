"""Parsers package"""
from .classifier import BookingClassifier
from .flight_parser import FlightParser
from .normalizer import TextNormalizer
from .pdf_text import extract_pdf_text

__all__ = ['BookingClassifier', 'FlightParser', 'TextNormalizer', 'extract_pdf_text']
