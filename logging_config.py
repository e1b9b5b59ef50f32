"""Logging setup shared by the CLI, web app and scheduler."""

import logging
import logging.config

from config import LOG_PATH

LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(asctime)s - %(name)-18s - %(levelname)-8s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'default',
            'level': 'INFO',
            'stream': 'ext://sys.stderr'
        },
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'default',
            'filename': LOG_PATH,
            'maxBytes': 10485760,  # 10 MB
            'backupCount': 5,
            'delay': True,
            'level': 'INFO'
        }
    },
    'loggers': {
        '': {  # Root logger
            'handlers': ['console', 'file'],
            'level': 'INFO',
            'propagate': True
        },
        # Quieten noisy third-party libraries
        'apscheduler': {
            'handlers': ['console', 'file'],
            'level': 'WARNING',
            'propagate': False
        },
        'werkzeug': {
            'handlers': ['console', 'file'],
            'level': 'WARNING',
            'propagate': False
        },
    }
}


def setup_logging(level: str = 'INFO'):
    """Applies the logging configuration."""
    LOGGING_CONFIG['handlers']['console']['level'] = level
    logging.config.dictConfig(LOGGING_CONFIG)
