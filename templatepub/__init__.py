"""templatepub - publish template projects to a template validation service."""

__all__ = ["__version__"]

__version__ = "0.1.0"
