"""Application composition layer for the command-line surface.

Controllers in this package wire presenters, view models, adapters, and use
cases into runnable sessions without placing business logic in presenters.
"""
