"""Shared utilities for the deal feed explorer."""

# Configuration
from utils.config import AppConfig, Config, DEFAULT_PAGE_SIZE, PAGE_SIZES

# Formatting utilities
from utils.formatting import (
    CATEGORICAL_FIELDS,
    format_categorical,
    format_cell,
    format_count,
)

# HTTP utilities
from utils.http import SessionManager

__all__ = [
    "AppConfig",
    "Config",
    "DEFAULT_PAGE_SIZE",
    "PAGE_SIZES",
    "CATEGORICAL_FIELDS",
    "format_categorical",
    "format_cell",
    "format_count",
    "SessionManager",
]
