"""
Root pytest configuration for the Django project.

Django itself lives under app/ (added to sys.path by pyproject's pytest
options). Project-wide fixtures are in app/conftest.py and app-specific
fixtures in each app's tests/conftest.py.
"""

import os

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
