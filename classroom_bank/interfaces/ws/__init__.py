"""Websocket transport."""
