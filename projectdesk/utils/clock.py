# projectdesk/utils/clock.py
# The single "today" used for overdue checks and start reminders
from datetime import date


def local_today() -> date:
    """Calendar date on the server's local clock"""
    return date.today()
