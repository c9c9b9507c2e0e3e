"""Pure Availability Window Engine.

This package turns plan anchor dates and a tenant Offset Policy into nested
availability bands for calendar and Gantt views. It must not import Django or
perform any I/O.
"""

from .builder import build_windows
from .policy import DEFAULT_POLICY, OffsetPolicy
from .sanitizer import sanitize

__all__ = ["DEFAULT_POLICY", "OffsetPolicy", "build_windows", "sanitize"]
