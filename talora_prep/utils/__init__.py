"""
Utility modules for configuration, logging and text processing.
"""
from .config import *
from .text_utils import *

__all__ = ['config', 'text_utils']
