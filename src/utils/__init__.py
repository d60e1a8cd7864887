"""
Utilities package.

Provides shared utilities for the command-line pipeline:
- helpers: file I/O, YAML loading, logging setup
"""
from .helpers import ensure_dir, load_data, save_data, load_yaml, configure_logging
