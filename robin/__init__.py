"""
Robin - AI Assistants for Slack Users
=====================================

Robin answers questions on behalf of Slack users. Each user describes
themselves once through the App Home setup form; when someone @mentions
them, Robin replies in the thread as that person would, using their
knowledge record and a text generation service.

This package provides:
- Knowledge store: one JSON record per user, keyed by email
- get-knowledge tool, served in-process or as an MCP stdio server
- Prompt assembly and generation clients
- Multi-user discussions in a Slack thread
"""

__version__ = "1.0.0"
