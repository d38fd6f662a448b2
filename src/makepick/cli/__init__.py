"""makepick CLI module.

This module provides the command-line interface for makepick, enabling users to:
    - Pick and build a target with `makepick run`
    - List candidate targets with `makepick targets`
    - Show the Makefile in use with `makepick where`
    - Diagnose setup issues with `makepick doctor`
"""
