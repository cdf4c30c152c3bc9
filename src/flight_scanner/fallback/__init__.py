"""AI fallback extraction package"""
from .gemini_extractor import GeminiExtractor, parse_response

__all__ = ['GeminiExtractor', 'parse_response']
