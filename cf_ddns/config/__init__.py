"""
Config package for cf-ddns.
"""
