"""Wrapper namespaces around standard primitives.

Each module is one template namespace (``strings``, ``math``, ``urls`` ...).
Arguments are coerced with ``viewfn.core.cast`` so any value can be passed.
"""
