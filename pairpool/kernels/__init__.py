"""
Pure integer kernels for swap pricing and share math.
"""
