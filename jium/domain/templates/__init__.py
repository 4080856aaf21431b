"""Built-in dialogue flows and their validation schemas."""

from jium.domain.templates import blog, email, journal, naming, sns

_MODULES = (blog, email, sns, naming, journal)

BUILTIN_TEMPLATES = tuple(m.DEFINITION for m in _MODULES)
BUILTIN_SCHEMAS = tuple(m.SCHEMA for m in _MODULES)

__all__ = ["BUILTIN_SCHEMAS", "BUILTIN_TEMPLATES"]
