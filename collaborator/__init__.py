"""Collaborator: a conversation assistant for group and personal chats."""

__version__ = "0.1.0"
