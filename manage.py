#!/usr/bin/env python
"""
Django command line for the peer review engine.

Tests run with pytest; see pytest.ini.
"""
import os
import sys

if __name__ == "__main__":
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'settings.base')

    from django.core.management import execute_from_command_line
    execute_from_command_line(sys.argv)
