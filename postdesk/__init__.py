"""Postdesk: blog post management API."""
