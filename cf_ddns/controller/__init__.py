"""
Controller package for cf-ddns.
"""
