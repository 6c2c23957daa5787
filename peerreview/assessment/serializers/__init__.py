"""
Export serializers from each module in this package.
"""

# pylint: disable=W0401

from .base import *
from .peer import *
from .staff import *
