"""
Polish Cow - a looping song with an ASCII animation sized to your terminal
"""

__version__ = "1.1.0"
