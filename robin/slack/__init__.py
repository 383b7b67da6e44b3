"""
Slack Integration
=================

- Bolt app and Socket Mode handler
- Event, action, command and view handlers
- Block Kit views for the App Home and modals
"""

from robin.slack.app import create_slack_app, create_socket_handler
from robin.slack.handlers import register_handlers

__all__ = ["create_slack_app", "create_socket_handler", "register_handlers"]
