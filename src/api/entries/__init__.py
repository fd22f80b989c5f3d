"""Entries bounded context.

Owner-scoped reading-list entries: the command layer, its persistence and
its HTTP surface.
"""
