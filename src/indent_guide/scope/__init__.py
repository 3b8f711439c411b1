"""Contain-line pointers and scope resolution."""

from .contain import ContainPointerIndex
from .models import (
    DEFAULT_SCOPE_POLICY,
    SCOPE_POLICIES,
    ContainLine,
    Direction,
    IndentScope,
    ScopePolicy,
    ScopeRange,
)
from .resolver import ScopeResolver

__all__ = [
    "ContainLine",
    "ContainPointerIndex",
    "DEFAULT_SCOPE_POLICY",
    "Direction",
    "IndentScope",
    "SCOPE_POLICIES",
    "ScopePolicy",
    "ScopeRange",
    "ScopeResolver",
]
