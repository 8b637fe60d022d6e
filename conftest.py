"""
Root pytest configuration for the Django project.

Sets environment defaults before Django settings are imported. Django
setup, test settings and markers live in app/conftest.py; app-specific
fixtures are defined in each app's tests/conftest.py.
"""

import os
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
# Keep local .env.development values out of the test run
os.environ.setdefault("ENV_FILE", str(ROOT_DIR / ".env.test"))

# Test settings that settings.py reads from the environment. Set here so
# they are in place before the first settings import, without an env file.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SECURE_SSL_REDIRECT", "false")
os.environ.setdefault("ALLOWED_HOSTS", "testserver,localhost")

# Run Celery tasks inline; no broker or result backend in tests
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("CELERY_TASK_EAGER_PROPAGATES", "true")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")
