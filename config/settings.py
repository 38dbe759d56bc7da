import logging
import os
from dotenv import load_dotenv

load_dotenv()

PROJECT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

ROOT_DIR = os.path.dirname(PROJECT_DIR)

APPS_DIR = os.path.join(PROJECT_DIR, 'irecruit')

BASE_DIR = os.path.join(PROJECT_DIR, 'config')

DEBUG = eval(os.environ.get('DEBUG', 'False'))

ALLOWED_HOSTS = os.environ.get('ALLOWED_HOSTS', '*').split(',')

DJANGO_APPS = (
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
)

THIRD_PARTY_APPS = (
    'rest_framework',
    'django_q',
    'django_filters',
)

PROJECT_APPS = (
    'irecruit.core',
    'irecruit.common',
    'irecruit.identity',
    'irecruit.recruitment',
)

INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + PROJECT_APPS

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'

TIME_ZONE = os.environ.get('TIME_ZONE', 'UTC')

USE_I18N = True

USE_TZ = True

LANGUAGE_CODE = 'en'

DEFAULT_STATIC_ROOT = os.path.join(ROOT_DIR, 'static/')
STATIC_ROOT = os.environ.get('STATIC_ROOT', DEFAULT_STATIC_ROOT)
STATIC_URL = '/static/'

DEFAULT_MEDIA_ROOT = os.path.join(ROOT_DIR, 'media/')
MEDIA_ROOT = os.environ.get('MEDIA_ROOT', DEFAULT_MEDIA_ROOT)
MEDIA_URL = '/media/'

# https://docs.djangoproject.com/en/2.1/ref/settings/#data-upload-max-memory-size
DATA_UPLOAD_MAX_MEMORY_SIZE = 10*1024*1024  # 10 MB

# Applicant documents (cover letter, resume, portfolio)
# irecruit.recruitment.utils.storage.DocumentStorage
DOCUMENT_MAX_SIZE = int(os.environ.get('DOCUMENT_MAX_SIZE', 10*1024*1024))
DOCUMENT_ALLOWED_EXTENSIONS = ('pdf',)
DOCUMENT_ALLOWED_CONTENT_TYPES = ('application/pdf',)
DOCUMENT_URL_MAX_EXPIRY_MINUTES = 60 * 24 * 7

# Rest Framework Config
DRF_RENDERER_CLASSES = ['rest_framework.renderers.JSONRenderer']
DRF_AUTH_CLASSES = [
    'irecruit.core.authentication.GatewayIdentityAuthentication',
]

DRF_BROWSABLE_API = eval(os.environ.get('DRF_BROWSABLE_API', 'False'))

if DRF_BROWSABLE_API:
    DRF_RENDERER_CLASSES.append('rest_framework.renderers.BrowsableAPIRenderer')
# End Rest Framework Config

REST_FRAMEWORK = {
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticated',
    ),
    'DEFAULT_AUTHENTICATION_CLASSES': DRF_AUTH_CLASSES,
    'DEFAULT_PAGINATION_CLASS': 'rest_framework.pagination.LimitOffsetPagination',
    'PAGE_SIZE': 20,
    'DEFAULT_FILTER_BACKENDS': (
        'django_filters.rest_framework.DjangoFilterBackend',
    ),
    'DEFAULT_RENDERER_CLASSES': DRF_RENDERER_CLASSES,
    'EXCEPTION_HANDLER': 'irecruit.core.exceptions.exception_handler',
}

# Headers forwarded by the API gateway once the auth service has
# validated the caller's token.
IDENTITY_ACCOUNT_HEADER = os.environ.get('IDENTITY_ACCOUNT_HEADER', 'HTTP_X_ACCOUNT_ID')
IDENTITY_ROLE_HEADER = os.environ.get('IDENTITY_ROLE_HEADER', 'HTTP_X_ACCOUNT_ROLE')

Q_CLUSTER_SYNC = eval(os.getenv('Q_CLUSTER_SYNC', 'False'))

# for qcluster configuration
# https://django-q.readthedocs.io/en/latest/configure.html
Q_CLUSTER = {
    'name': 'irecruit',
    'workers': int(os.environ.get('Q_CLUSTER_WORKERS', 4)),
    'recycle': 500,
    'timeout': int(os.environ.get('Q_CLUSTER_TIMEOUT', 60*15)),
    # retry value should be larger than timeout value
    'retry': int(os.environ.get('Q_CLUSTER_RETRY', 60*15 + 1)),
    'compress': True,
    'save_limit': 250,
    'queue_limit': 500,
    'label': 'Django Q',
    'redis': {
        'host': os.environ.get('Q_CLUSTER_REDIS_HOST', '127.0.0.1'),
        'port': int(os.environ.get('Q_CLUSTER_REDIS_PORT', '6379')),
        'db': int(os.environ.get('Q_CLUSTER_REDIS_DB', '0'))
    },
    'sync': Q_CLUSTER_SYNC,
}

# Event streams (identity events in, platform events out)
REDIS_DATABASE = {
    'host': os.environ.get('REDIS_HOST', Q_CLUSTER['redis']['host']),
    'port': int(os.environ.get('REDIS_PORT', Q_CLUSTER['redis']['port'])),
    'db': int(os.environ.get('REDIS_DB', '2')),
    'decode_responses': True,
}

IDENTITY_EVENT_TOPICS = {
    'identity-created': 'auth.user.registered',
    'email-verified': 'auth.email.verified',
    'role-changed': 'auth.role.changed',
    'account-disabled': 'auth.account.disabled',
}
IDENTITY_EVENT_GROUP = os.environ.get('IDENTITY_EVENT_GROUP', 'platform-service')
IDENTITY_EVENT_PARTITIONS = int(os.environ.get('IDENTITY_EVENT_PARTITIONS', 4))
IDENTITY_EVENT_MAX_DELIVERIES = int(os.environ.get('IDENTITY_EVENT_MAX_DELIVERIES', 5))
# seconds
IDENTITY_EVENT_HANDLER_TIMEOUT = int(os.environ.get('IDENTITY_EVENT_HANDLER_TIMEOUT', 30))
IDENTITY_EVENT_RETRY_DELAY = int(os.environ.get('IDENTITY_EVENT_RETRY_DELAY', 2))
PROCESSED_EVENT_RETENTION_DAYS = int(os.environ.get('PROCESSED_EVENT_RETENTION_DAYS', 30))

PLATFORM_EVENT_STREAMS = {
    'application-submitted': 'platform.application.submitted',
    'application-status-changed': 'platform.application.status-changed',
}
PLATFORM_EVENT_STREAM_MAXLEN = int(os.environ.get('PLATFORM_EVENT_STREAM_MAXLEN', 100000))

SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

SHOW_LOGS_ON_CONSOLE = eval(os.environ.get('CONSOLE_LOG', 'False'))

SECRET_KEY = os.environ.get('SECRET_KEY', 'kJ9xq2Lr8vNw3ZpT6yHc1sDf4gUb7mEa')

ENVIRONMENT = os.environ.get('ENVIRONMENT', 'development')

if os.environ.get('DATABASE_NAME'):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.environ.get('DATABASE_NAME'),
            'USER': os.environ.get('DATABASE_USER', None),
            'PASSWORD': os.environ.get('DATABASE_PASSWORD', None),
            'HOST': os.environ.get('DATABASE_HOST', 'localhost'),
            'PORT': os.environ.get('DATABASE_PORT', '5432'),
        },
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': os.path.join(PROJECT_DIR, 'db.sqlite3'),
        },
    }

if os.environ.get('DATABASE_TEST_TEMPLATE'):
    DATABASES['default']['TEST'] = {
        'TEMPLATE': os.environ.get('DATABASE_TEST_TEMPLATE')}

DEFAULT_AUTO_FIELD = 'django.db.models.AutoField'

BACKEND_URL = os.environ.get('BACKEND_URL', 'http://localhost:8000')

# LOGGING FORMATS AND CONFIGURATIONS
LOG_DIRECTORY = os.path.join(
    PROJECT_DIR if ENVIRONMENT == 'development' else ROOT_DIR,
    'logs'
)
if not os.path.exists(LOG_DIRECTORY):
    os.mkdir(LOG_DIRECTORY)

extend_logging = dict()
extend_handlers = dict()


class RequireConsoleLog(logging.Filter):
    def filter(self, record):
        allowed_site_packages = ('django', 'rest_framework')
        if 'site-packages' in record.pathname:
            return any([x in record.pathname for x in allowed_site_packages])
        return SHOW_LOGS_ON_CONSOLE


for module in PROJECT_APPS:
    extend_logging.update({
        module: {
            'handlers': [module, 'console'],
            'propagate': False,
        }
    })
    extend_handlers.update({
        module: {
            'level': 'DEBUG',
            'class': 'logging.handlers.TimedRotatingFileHandler',
            'formatter': 'verbose',
            'filename': os.path.join(
                LOG_DIRECTORY, module.split('.')[1] + '.log'
            ),
            'when': 'midnight',
        }
    })

LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'formatters': {
        'verbose': {
            'format': '\n%(levelname)s %(asctime)s %(module)s %(process)d %(thread)d %(message)s',
        },
        'simple': {
            'format': '{levelname} {message} -->from [{module}]',
            'style': '{'
        },
    },
    'filters': {
        'require_console_log': {
            '()': RequireConsoleLog
        }
    },
    'handlers': {
        'default': {
            'level': 'DEBUG',
            'class': 'logging.handlers.TimedRotatingFileHandler',
            'filename': os.path.join(LOG_DIRECTORY, 'debug.log'),
            'formatter': 'verbose',
            'when': 'midnight',
        },
        'console': {
            'level': 'DEBUG',
            'filters': ['require_console_log'],
            'class': 'logging.StreamHandler',
            'formatter': 'simple'
        },
        'django': {
            'level': 'INFO',
            'class': 'logging.FileHandler',
            'filename': os.path.join(LOG_DIRECTORY, 'django.log'),
            'formatter': 'verbose',
        },
        **extend_handlers
    },
    'loggers': {
        '': {
            'handlers': ['default', 'console'],
            'level': 'DEBUG',
            'propagate': False,
        },
        'django': {
            'handlers': ['django'],
            'propagate': True,
        },
        **extend_logging
    },
}
