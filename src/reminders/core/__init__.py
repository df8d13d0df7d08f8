"""Core domain package for reminders.

Core contains the rule grammar, the recurrence matcher and the scan pipeline
without any HTTP or filesystem code, keeping the business logic portable.
"""
