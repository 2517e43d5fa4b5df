"""
Command-line front-end for field mapping and record validation.
"""
