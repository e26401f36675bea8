"""
Utils package for cf-ddns.
"""
