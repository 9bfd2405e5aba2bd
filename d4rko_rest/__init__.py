"""
Read-only WinGet REST source backed by singleton YAML manifests on GitHub.
"""

__version__ = "0.1.0"
