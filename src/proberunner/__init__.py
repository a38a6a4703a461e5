"""proberunner package."""

__all__ = ["app", "main", "get_version"]


def get_version() -> str:
    """Return the installed proberunner version."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        return pkg_version("proberunner")
    except PackageNotFoundError:
        return "0.0.0+unknown"


def __getattr__(name: str):
    if name in ("app", "main"):
        from proberunner.cli import app, main

        return {"app": app, "main": main}[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted(__all__)
