"""
Small pure helpers with no I/O.
"""
