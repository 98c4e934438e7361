"""
Export run orchestration and command-line entry point.
"""
