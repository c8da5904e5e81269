"""
Battery report package.

Samples the local battery charge level at a fixed interval, keeps the
samples in memory for the lifetime of the process, and renders them into a
self-contained HTML chart on demand.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-001)

TODO:
- None
"""
