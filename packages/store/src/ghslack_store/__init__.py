"""Notification state persisted inside GitHub issue and pull request bodies."""
