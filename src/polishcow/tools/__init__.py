"""
Offline helper scripts (not used at runtime)
"""
