"""Source discovery for autoapi."""

from .enumerator import SourceEnumerator
from .models import SourceDescriptor, SourceKind

__all__ = ["SourceDescriptor", "SourceEnumerator", "SourceKind"]
