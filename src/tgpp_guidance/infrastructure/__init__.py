"""
Infrastructure Layer - Data sources

Contains:
- knowledge: YAML catalogue files and their loader
"""
