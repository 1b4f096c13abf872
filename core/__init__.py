"""core/ -- Kernel shared by every layer: settings, validation, database helpers.

Layer rule: core/ imports only stdlib and third-party libraries.
"""
