"""Scheduled reminders: duration parsing and the delivery watcher."""
