"""
Script: release_tools package
What: Holds Python release helpers that run as steps in the CI pipeline.
Doing: Groups the CLI entrypoint, the deploy gate, the POM reader, and shared utility code in one importable package.
Why: Keeps release checks readable and testable instead of spreading them across ad hoc build scripts.
Goal: Provide a clear, maintainable home for release gating and manifest lookups.
"""
