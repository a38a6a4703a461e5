"""Data models for technique categories and their test cases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ParamPayload:
    """A query parameter appended to the target URL."""

    key: str
    value: str

    kind = "param"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "key": self.key, "value": self.value}

    def summary(self) -> str:
        return f"{self.key}={self.value}"


@dataclass(frozen=True, slots=True)
class HeaderPayload:
    """An extra request header."""

    name: str
    value: str

    kind = "header"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "name": self.name, "value": self.value}

    def summary(self) -> str:
        return f"{self.name}: {self.value}"


@dataclass(frozen=True, slots=True)
class MethodPayload:
    """An HTTP method, sent directly or through an override carrier.

    ``override`` is either a header name (``X-HTTP-Method-Override``) or the
    ``_method`` query parameter. When it is ``None`` the request verb itself
    is replaced.
    """

    method: str
    override: str | None = None

    kind = "method"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "method": self.method, "override": self.override}

    def summary(self) -> str:
        if self.override:
            return f"{self.override}: {self.method}"
        return self.method


@dataclass(frozen=True, slots=True)
class StoragePayload:
    """A client-side storage entry (recorded, not applied)."""

    key: str
    value: str

    kind = "storage"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "key": self.key, "value": self.value}

    def summary(self) -> str:
        return f"{self.key}={self.value}"


@dataclass(frozen=True, slots=True)
class OpaquePayload:
    """Free-form technique input (recorded, not applied)."""

    value: str

    kind = "opaque"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "value": self.value}

    def summary(self) -> str:
        return self.value


Payload = ParamPayload | HeaderPayload | MethodPayload | StoragePayload | OpaquePayload


def payload_from_dict(data: dict[str, Any]) -> Payload:
    """Rebuild a payload from its ``to_dict`` form."""
    kind = data.get("kind")
    if kind == "param":
        return ParamPayload(key=data["key"], value=data["value"])
    if kind == "header":
        return HeaderPayload(name=data["name"], value=data["value"])
    if kind == "method":
        return MethodPayload(method=data["method"], override=data.get("override"))
    if kind == "storage":
        return StoragePayload(key=data["key"], value=data["value"])
    if kind == "opaque":
        return OpaquePayload(value=data["value"])
    raise ValueError(f"Unknown payload kind: {kind!r}")


@dataclass(frozen=True, slots=True)
class TestCase:
    """One concrete, parameterized instance of a technique."""

    __test__ = False

    category: str
    payload: Payload
    description: str


@dataclass(frozen=True, slots=True)
class TechniqueCategory:
    """A named class of probe with its ordered test cases."""

    id: str
    name: str
    description: str
    tests: tuple[TestCase, ...]


@dataclass(frozen=True, slots=True)
class CategoryDescriptor:
    """Lightweight view of a category used for listings."""

    id: str
    name: str
    description: str
    count: int
