from pathlib import Path

from environs import Env

env = Env()
env.read_env(recurse=False)

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = env.str('SECRET_KEY', 'django-insecure-2w#r8c7!q1k$0bx+v5p9m@e4j6yz3t&hd_ln-fs*ua%g')

ALLOWED_HOSTS = env.list('ALLOWED_HOSTS', [])

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'reconciler',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {'format': '%(asctime)s %(levelname)s %(name)s: %(message)s'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'loggers': {
        'reconciler': {
            'handlers': ['console'],
            'level': env.str('LOG_LEVEL', 'INFO'),
        },
    },
}

# Celery
CELERY_BROKER_URL = env.str('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_RESULT_BACKEND = CELERY_BROKER_URL
CELERY_TASK_SERIALIZER = 'json'
CELERY_ACCEPT_CONTENT = ['json']

# Product backend API
PRODUCT_API_BASE_URL = env.str('PRODUCT_API_BASE_URL', 'https://api.marketplace.local/v1')
PRODUCT_API_TOKEN = env.str('PRODUCT_API_TOKEN', 'marketplace-admin-token')
PRODUCT_API_TIMEOUT = env.float('PRODUCT_API_TIMEOUT', 10.0)
PRODUCT_API_LANGUAGE = env.str('PRODUCT_API_LANGUAGE', 'en')

# Local product export used by the JSON source
PRODUCT_DATA_FILE = env.path('PRODUCT_DATA_FILE', BASE_DIR / 'products.json')

# Edit-session providers, swap via env or override in dev.py/prod.py
PRODUCT_SOURCE_CLASS = env.str('PRODUCT_SOURCE_CLASS', 'reconciler.sources.api_source.ApiProductSource')
PRODUCT_CLIENT_CLASS = env.str('PRODUCT_CLIENT_CLASS', 'reconciler.clients.product_client.ProductApiClient')
