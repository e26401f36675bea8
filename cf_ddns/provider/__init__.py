"""
Provider package for cf-ddns.
"""
