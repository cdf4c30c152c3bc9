"""Mail source package"""
from .gmail_source import GmailSource, build_gmail_service, load_credentials

__all__ = ['GmailSource', 'build_gmail_service', 'load_credentials']
