"""
Settings for the test run.
In-memory SQLite, fast hashing, no throttling surprises.
"""
from core.settings.base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    'DEFAULT_THROTTLE_RATES': {
        'anon': '10000/day',
        'user': '10000/day',
        'applications': '10000/hour',
    },
}

LOGGING['root'] = {'handlers': ['null'], 'level': 'CRITICAL'}  # noqa: F405
for _logger in LOGGING['loggers'].values():  # noqa: F405
    _logger['handlers'] = ['null']
