"""Probe building and execution."""

from .builder import TECHNIQUE_HEADER, build_request, validate_target
from .executor import ProbeExecutor, classify_status
from .models import STATUS_ORDER, TIMEOUT_MESSAGE, ProbeRequest, ProbeResult, ProbeStatus

__all__ = [
    "ProbeExecutor",
    "ProbeRequest",
    "ProbeResult",
    "ProbeStatus",
    "STATUS_ORDER",
    "TECHNIQUE_HEADER",
    "TIMEOUT_MESSAGE",
    "build_request",
    "classify_status",
    "validate_target",
]
