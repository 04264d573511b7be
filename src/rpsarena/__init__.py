"""Rock Paper Scissors Arena.

A coordinator that pairs network participants into best-of-3 matches
over a newline-delimited text protocol.
"""

__version__ = "0.1.0"
