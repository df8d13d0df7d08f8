"""Recurring reminders embedded in plain-text notes and to-do lists.

Lines such as ``/remind wed 1pm standup`` or ``- [ ] pay rent /remind monthly``
are scanned from a notes source, matched against a reference minute, and
delivered through a notification adapter when they fire.
"""
