"""Logging configuration utilities"""
import logging
import logging.config
from pathlib import Path

# Third-party loggers that are too chatty at DEBUG
QUIET_LOGGERS = ('googleapiclient.discovery_cache', 'urllib3', 'pypdf')


def setup_logging(log_level='INFO', log_file='logs/flight_scanner.log'):
    """
    Configure console and rotating file logging

    Args:
        log_level: Console level; the file always receives DEBUG
        log_file: Path of the rotating log file
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'detailed': {
                'format': '%(asctime)s | %(threadName)-12s | %(name)-40s | %(levelname)-8s | %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'simple': {
                'format': '%(levelname)-8s | %(message)s'
            }
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': log_level,
                'formatter': 'simple'
            },
            'file': {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': 'DEBUG',
                'formatter': 'detailed',
                'filename': str(log_path),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }
        },
        'loggers': {
            name: {'level': 'WARNING'} for name in QUIET_LOGGERS
        },
        'root': {
            'level': 'DEBUG',
            'handlers': ['console', 'file']
        }
    }

    logging.config.dictConfig(config)
    return logging.getLogger(__name__)
