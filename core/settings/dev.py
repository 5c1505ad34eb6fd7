from .base import *  # noqa: F401,F403
from .base import BASE_DIR, env

DEBUG = env.bool('DEBUG', True)

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

PRODUCT_SOURCE_CLASS = env.str('PRODUCT_SOURCE_CLASS', 'reconciler.sources.json_source.JsonFileSource')
