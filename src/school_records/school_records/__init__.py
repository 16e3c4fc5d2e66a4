"""School Records package.

This package is organized by feature modules (students, billing, academic, ...)
layered over one generic entity store with pluggable storage backends.
"""
