"""Technique catalogue for proberunner."""

from .models import (
    CategoryDescriptor,
    HeaderPayload,
    MethodPayload,
    OpaquePayload,
    ParamPayload,
    Payload,
    StoragePayload,
    TechniqueCategory,
    TestCase,
    payload_from_dict,
)
from .registry import Catalogue, default_catalogue

__all__ = [
    "Catalogue",
    "CategoryDescriptor",
    "HeaderPayload",
    "MethodPayload",
    "OpaquePayload",
    "ParamPayload",
    "Payload",
    "StoragePayload",
    "TechniqueCategory",
    "TestCase",
    "default_catalogue",
    "payload_from_dict",
]
