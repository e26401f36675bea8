"""
Source package for cf-ddns.
"""
