"""Built-in technique definitions.

Each category is a plain table turned into ``TestCase`` tuples at import time.
Only ``parameter``, ``header`` and ``method`` payloads change the outbound
request; the rest are recorded on the probe as technique metadata.
"""

from .models import (
    HeaderPayload,
    MethodPayload,
    OpaquePayload,
    ParamPayload,
    StoragePayload,
    TechniqueCategory,
    TestCase,
)

PARAMETERS = [
    ("debug", "true"),
    ("admin", "true"),
    ("isAdmin", "true"),
    ("role", "admin"),
    ("access", "all"),
    ("override", "true"),
    ("skipValidation", "true"),
    ("force", "true"),
    ("test", "true"),
    ("internal", "true"),
    ("preview", "true"),
    ("bypass", "true"),
    ("verified", "true"),
    ("status", "approved"),
    ("user_id", "1"),
]

HEADERS = [
    ("X-Forwarded-For", "127.0.0.1"),
    ("X-Originating-IP", "127.0.0.1"),
    ("X-Real-IP", "10.0.0.1"),
    ("X-Remote-Addr", "127.0.0.1"),
    ("X-Client-IP", "127.0.0.1"),
    ("X-Forwarded-Host", "localhost"),
    ("X-Original-URL", "/"),
    ("X-Rewrite-URL", "/"),
    ("X-Custom-IP-Authorization", "127.0.0.1"),
    ("X-Admin", "true"),
    ("X-User-Role", "admin"),
    ("X-Internal-Request", "true"),
    ("X-Debug-Mode", "true"),
    ("X-API-Version", "0.1"),
    ("Origin", "null"),
]

METHODS = ["DELETE", "PUT", "PATCH", "OPTIONS"]

METHOD_OVERRIDES = [
    "X-HTTP-Method-Override",
    "X-HTTP-Method",
    "X-Method-Override",
    "_method",
]

CONTENT_TYPES = [
    "text/plain",
    "application/x-www-form-urlencoded",
    "multipart/form-data",
    "application/xml",
    "text/xml",
    "application/octet-stream",
    "application/json; charset=utf-8",
    "application/json;charset=UTF-8",
    "",
]

AUTH_VARIANTS = [
    ("no-credentials", "Request without cookies or Authorization header"),
    ("empty-bearer", "Authorization header with an empty bearer token"),
    ("alg-none", "Unsigned JWT with alg=none"),
    ("expired-token", "JWT whose exp claim is in the past"),
    ("foreign-token", "Token issued for a different session"),
    ("scheme-case", "Lower-case 'bearer' authorization scheme"),
]

STORAGE_ENTRIES = [
    ("role", "admin"),
    ("isAdmin", "true"),
    ("debug", "true"),
    ("featureFlags", "*"),
    ("accessLevel", "elevated"),
    ("lockedOut", "false"),
    ("emailVerified", "true"),
    ("mfaPassed", "true"),
    ("permissions", '["*"]'),
    ("userId", "1"),
    ("tenantId", "1"),
    ("sessionState", "authenticated"),
    ("consentGiven", "true"),
    ("onboardingComplete", "true"),
    ("betaAccess", "true"),
    ("readOnly", "false"),
    ("locale", "../../"),
    ("apiBase", "http://127.0.0.1"),
    ("returnTo", "//localhost"),
    ("cacheVersion", "0"),
]

FRONTEND_OVERRIDES = [
    "Re-enable a disabled submit button",
    "Unhide a hidden form field",
    "Remove client-side validation attributes",
    "Make a read-only input editable",
    "Skip a confirmation dialog",
]

RACE_SCENARIOS = [
    "Concurrent duplicate submission x2",
    "Concurrent duplicate submission x5",
    "Concurrent duplicate submission x10",
    "Concurrent duplicate submission x20",
    "Last-write-wins double update",
    "Check-then-act window",
    "Token reuse inside validity window",
    "Interleaved create and delete",
    "Parallel retry storm",
    "Single-packet burst",
]

ENCODINGS = [
    ("URL encoded", "path:percent-encode separators"),
    ("Double encoded", "path:double percent-encode separators"),
    ("Unicode escape", "path:\\u002d escapes"),
    ("Case variation", "path:upper-case path"),
    ("Path traversal", "path:/api/../api/"),
    ("Double slash", "path://"),
    ("Trailing slash", "path:trailing /"),
    ("Query suffix", "query:?bypass=true"),
    ("Fragment suffix", "fragment:#bypass"),
]

ALT_ENDPOINTS = [
    "/graphql",
    "/api/v1/{resource}",
    "/api/v2/{resource}",
    "/admin/api/{resource}",
    "/internal/{resource}",
    "/legacy/{resource}",
    "/api/{resource}/remove",
]


def _parameter_tests() -> tuple[TestCase, ...]:
    return tuple(
        TestCase("parameter", ParamPayload(key, value), f"Parameter {key}={value}")
        for key, value in PARAMETERS
    )


def _header_tests() -> tuple[TestCase, ...]:
    return tuple(
        TestCase("header", HeaderPayload(name, value), f"Header {name}")
        for name, value in HEADERS
    )


def _method_tests() -> tuple[TestCase, ...]:
    direct = [TestCase("method", MethodPayload(m), f"Direct {m}") for m in METHODS]
    overridden = [
        TestCase("method", MethodPayload(m, override), f"{override}: {m}")
        for m in METHODS
        for override in METHOD_OVERRIDES
    ]
    return tuple(direct + overridden)


def _content_tests() -> tuple[TestCase, ...]:
    return tuple(
        TestCase("content", OpaquePayload(f"Content-Type: {ctype}"), ctype or "(empty)")
        for ctype in CONTENT_TYPES
    )


def _auth_tests() -> tuple[TestCase, ...]:
    return tuple(TestCase("auth", OpaquePayload(key), text) for key, text in AUTH_VARIANTS)


def _storage_tests() -> tuple[TestCase, ...]:
    return tuple(
        TestCase("storage", StoragePayload(key, value), f"Storage {key}={value}")
        for key, value in STORAGE_ENTRIES
    )


def _frontend_tests() -> tuple[TestCase, ...]:
    return tuple(TestCase("frontend", OpaquePayload(text), text) for text in FRONTEND_OVERRIDES)


def _race_tests() -> tuple[TestCase, ...]:
    return tuple(TestCase("race", OpaquePayload(text), text) for text in RACE_SCENARIOS)


def _encoding_tests() -> tuple[TestCase, ...]:
    return tuple(TestCase("encoding", OpaquePayload(value), name) for name, value in ENCODINGS)


def _endpoint_tests() -> tuple[TestCase, ...]:
    return tuple(
        TestCase("endpoint", OpaquePayload(path), f"Alternate endpoint {path}")
        for path in ALT_ENDPOINTS
    )


def builtin_categories() -> tuple[TechniqueCategory, ...]:
    """Return the shipped categories in display order."""
    return (
        TechniqueCategory(
            "parameter",
            "Parameter Injection",
            "Extra query parameters that toggle server-side checks",
            _parameter_tests(),
        ),
        TechniqueCategory(
            "header",
            "Header Manipulation",
            "Trust and routing headers added to the request",
            _header_tests(),
        ),
        TechniqueCategory(
            "method",
            "Method Override",
            "Alternate verbs and method-override carriers",
            _method_tests(),
        ),
        TechniqueCategory(
            "content",
            "Content-Type",
            "Alternate body encodings (recorded only)",
            _content_tests(),
        ),
        TechniqueCategory(
            "auth",
            "Authorization",
            "Credential and token variations (recorded only)",
            _auth_tests(),
        ),
        TechniqueCategory(
            "storage",
            "Storage",
            "Client-side storage tampering (recorded only)",
            _storage_tests(),
        ),
        TechniqueCategory(
            "frontend",
            "Frontend",
            "Client-side control overrides (recorded only)",
            _frontend_tests(),
        ),
        TechniqueCategory(
            "race",
            "Race Condition",
            "Timing and concurrency scenarios (recorded only)",
            _race_tests(),
        ),
        TechniqueCategory(
            "encoding",
            "Encoding",
            "URL and path encoding variants (recorded only)",
            _encoding_tests(),
        ),
        TechniqueCategory(
            "endpoint",
            "Alt Endpoint",
            "Alternate routes for the same operation (recorded only)",
            _endpoint_tests(),
        ),
    )
