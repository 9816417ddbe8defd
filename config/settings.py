"""
Django settings for the Property Calculators service.

Production configuration with environment variable support.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent

# Security
SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-local-development-key')

DEBUG = os.environ.get('DEBUG', 'False').lower() in ('true', '1', 'yes')

ALLOWED_HOSTS = os.environ.get('ALLOWED_HOSTS', 'localhost,testserver').split(',')

# Security headers
SECURE_BROWSER_XSS_FILTER = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'

# Application definition
INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',

    # Third-party
    'rest_framework',

    # Local apps
    'apps.core',
    'apps.calculators',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

WSGI_APPLICATION = 'config.wsgi.application'

# Calculators are stateless; no database is configured
DATABASES = {}

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'Asia/Kolkata'
USE_I18N = True
USE_TZ = True

# Django REST Framework
REST_FRAMEWORK = {
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
    ],
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'UNAUTHENTICATED_USER': None,
    'EXCEPTION_HANDLER': 'apps.core.exceptions.custom_exception_handler',
    'DEFAULT_PAGINATION_CLASS': None,
    'NON_FIELD_ERRORS_KEY': 'errors',
    # Amounts are rendered as JSON numbers
    'COERCE_DECIMAL_TO_STRING': False,
}

# Calculator bounds and currency unit
CALCULATORS = {
    # Minor currency unit amounts are rounded to ('0.01' paise, '1' rupee)
    'CURRENCY_QUANTUM': os.environ.get('CALCULATOR_CURRENCY_QUANTUM', '0.01'),
    'MAX_PRINCIPAL': os.environ.get('CALCULATOR_MAX_PRINCIPAL', '1000000000000'),
    'MAX_ANNUAL_RATE': os.environ.get('CALCULATOR_MAX_ANNUAL_RATE', '100'),
    'MAX_TENURE_MONTHS': int(os.environ.get('CALCULATOR_MAX_TENURE_MONTHS', '600')),
    # Schedules longer than this many months also get a yearly summary
    'YEARLY_SUMMARY_THRESHOLD': int(os.environ.get('CALCULATOR_YEARLY_SUMMARY_THRESHOLD', '12')),
}

# Logging
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose' if DEBUG else 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'apps': {
            'handlers': ['console'],
            'level': os.environ.get('APP_LOG_LEVEL', 'DEBUG'),
            'propagate': False,
        },
    },
}
