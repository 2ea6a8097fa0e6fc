"""HatHak notification service package.

Ensures the local ``hathak`` package is resolved as a regular package rather
than a namespace package.
"""
