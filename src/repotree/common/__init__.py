"""Shared utilities for repotree."""

from repotree.common.errors import (
    AmbiguousMatch,
    AmbiguousShorthand,
    DriverFailure,
    FilesystemError,
    InvalidSpecifier,
    NotFound,
    RepoTreeError,
    UnknownVcs,
)
from repotree.common.ui import (
    CYAN,
    DIM,
    GREEN,
    RED,
    YELLOW,
    fuzzy_select,
    log,
    style_dim,
    style_error,
    style_success,
    style_warn,
)
from repotree.common.validate import ValidationError
from repotree.common.vcs import VcsDriver, VcsKind, default_drivers

__all__ = [
    "CYAN",
    "DIM",
    "GREEN",
    "RED",
    "YELLOW",
    "AmbiguousMatch",
    "AmbiguousShorthand",
    "DriverFailure",
    "FilesystemError",
    "InvalidSpecifier",
    "NotFound",
    "RepoTreeError",
    "UnknownVcs",
    "ValidationError",
    "VcsDriver",
    "VcsKind",
    "default_drivers",
    "fuzzy_select",
    "log",
    "style_dim",
    "style_error",
    "style_success",
    "style_warn",
]
