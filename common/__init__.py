"""
Common functionality shared by the Pickpocket packages.

This package contains modules for logging, configuration, argument parsing and
validation, link previews, and the destination plugin registry.
"""
