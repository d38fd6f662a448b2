"""CLI commands for makepick.

This package contains the implementation of CLI commands:
    - run: Choose a target and build it
    - targets: List candidate targets
    - where: Print the Makefile that would be used
    - doctor: Diagnose issues
    - init: Write a .makepick.yml
    - version: Show version information
"""
