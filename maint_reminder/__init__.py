"""Home maintenance log reminder.

Scans a maintenance log, classifies each task as on schedule, due soon or
overdue, and mails one consolidated reminder.
"""

__version__ = "0.1.0"
