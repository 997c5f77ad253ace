"""
Command line entry point for showing screen alerts.
"""
