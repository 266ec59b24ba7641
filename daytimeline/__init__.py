"""
daytimeline - compose a staff member's working day into a typed timeline.
"""

__version__ = "0.1.0"
