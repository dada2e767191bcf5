"""Event handling, rendering and Slack delivery for ghslack."""
