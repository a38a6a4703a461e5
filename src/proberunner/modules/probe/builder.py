"""Turn a target and a test case into a concrete probe request.

Only ``parameter``, ``header`` and ``method`` payloads shape the outbound
request. Every other category (storage, frontend, race, content, auth,
encoding, endpoint) describes a technique that cannot be expressed as one
request here: the baseline request is sent unchanged apart from an
informational ``X-Probe-Technique`` header, and the probe result records the
payload verbatim. Statuses for those categories therefore say nothing about
whether the technique itself had an effect.
"""

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from proberunner.errors import InvalidTargetError
from proberunner.modules.catalogue import (
    HeaderPayload,
    MethodPayload,
    ParamPayload,
    TestCase,
)

from .models import ProbeRequest

BASELINE_METHOD = "POST"
BASELINE_BODY = "{}"
TECHNIQUE_HEADER = "X-Probe-Technique"
METHOD_QUERY_PARAM = "_method"


def baseline_headers() -> dict[str, str]:
    return {"Content-Type": "application/json"}


def validate_target(target: str) -> str:
    """Return the target unchanged if it is an absolute http(s) URL."""
    try:
        parts = urlsplit(target.strip())
    except (AttributeError, ValueError) as exc:
        raise InvalidTargetError(f"Invalid target URL: {target!r}") from exc
    if parts.scheme not in ("http", "https") or not parts.netloc or not parts.hostname:
        raise InvalidTargetError(f"Invalid target URL: {target!r}")
    return target.strip()


def _with_query_param(url: str, key: str, value: str) -> str:
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.append((key, value))
    return urlunsplit(parts._replace(query=urlencode(query)))


def _set_header(headers: dict[str, str], name: str, value: str) -> None:
    """Set a header, replacing any existing key that differs only in case."""
    for existing in [key for key in headers if key.lower() == name.lower()]:
        del headers[existing]
    headers[name] = value


def build_request(target: str, test_case: TestCase) -> ProbeRequest:
    """Build the probe request for ``test_case`` against ``target``."""
    url = validate_target(target)
    method = BASELINE_METHOD
    headers = baseline_headers()
    payload = test_case.payload
    category = test_case.category

    if category == "parameter" and isinstance(payload, ParamPayload):
        url = _with_query_param(url, payload.key, payload.value)
    elif category == "header" and isinstance(payload, HeaderPayload):
        _set_header(headers, payload.name, payload.value)
    elif category == "method" and isinstance(payload, MethodPayload):
        verb = payload.method.upper()
        if payload.override is None:
            method = verb
        elif payload.override == METHOD_QUERY_PARAM:
            url = _with_query_param(url, METHOD_QUERY_PARAM, verb)
        else:
            _set_header(headers, payload.override, verb)
    else:
        _set_header(headers, TECHNIQUE_HEADER, f"{category}:{payload.summary()}")

    return ProbeRequest(
        url=url,
        method=method,
        headers=headers,
        body=BASELINE_BODY,
        test_case=test_case,
    )
