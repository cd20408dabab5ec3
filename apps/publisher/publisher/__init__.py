"""Publishes desktop build artifacts (installers and updater bundles) to an
external artifact store after a CI build job completes."""

__version__ = "0.1.0"
