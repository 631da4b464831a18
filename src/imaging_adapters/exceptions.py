"""
Custom exception classes for the imaging adapter registry.

Registry construction itself never raises; these are raised by the explicit
manifest loading APIs and caught by the default plugin discovery.
"""


class AdapterRegistryError(Exception):
    """Base exception for all imaging adapter registry errors."""
    pass


class ManifestLoadError(AdapterRegistryError):
    """Error loading a plugin manifest file."""

    def __init__(self, file_name: str, message: str):
        self.file_name = file_name
        self.message = message
        super().__init__(f"Error loading {file_name}: {message}")
