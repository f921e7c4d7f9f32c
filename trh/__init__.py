"""Release hooks for CI pipelines: artifact naming, release notes, deploy metadata."""

__version__ = "0.3.0"
