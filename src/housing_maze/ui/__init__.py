"""
Desktop UI for the Housing Maze Toolkit.
"""
