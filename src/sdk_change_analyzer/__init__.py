"""
SDK Change Analyzer

Structures the diff of a regenerated API client, extracts endpoint and
import signals from the generated and wrapper source trees, and scores how
disruptive the change is for the hand-written wrapper layer.
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("sdk-change-analyzer")
except PackageNotFoundError:
    __version__ = "0.1.0"

# Public API exports
__all__ = [
    "__version__",
]
