"""pcritical: critical path estimation for Go package builds."""

__version__ = "0.3.0"
