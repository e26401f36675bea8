"""
Models package for cf-ddns.
"""
