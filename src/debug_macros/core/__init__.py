"""
Core Package.

Contains the macro expansion logic:
- Engine and per-module orchestration
- Flag table resolution
- Guard compilation and deferred rewrites
- Macro builders and dispatch
"""
