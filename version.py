"""
Blockfill Version Information

This file contains the single source of truth for the Blockfill version number.
All version references throughout the codebase should import from this file.
"""

# Version number (semantic versioning)
__version__ = "1.0.0"

# Display name for the CLI and web API
__version_display__ = f"v{__version__}"

# Level format version ("v" in share codes and level documents).
# Bump whenever a change to generation would alter levels for an existing code.
LEVEL_FORMAT_VERSION = 1
