"""Pytest configuration for page attachment tests."""

import shutil

from django.conf import settings


def pytest_unconfigure(config):
    """Remove the uploads written by the test run."""
    shutil.rmtree(settings.MEDIA_ROOT, ignore_errors=True)
