"""Human-readable status lines for a UI to show after a session."""

from maquette.upload.types import ArtifactSet


def describe_success(artifacts: ArtifactSet) -> str:
    lines = ["Saved files:"]
    lines.extend(f"- {path.name}" for path in artifacts.paths.values())
    return "\n".join(lines)


def describe_failure(exc: BaseException) -> str:
    message = str(exc) or type(exc).__name__
    return f"Upload failed: {message}"
