"""Routing — template compilation and first-match dispatch.

Route templates are compiled once at registration time into anchored
regular expressions; requests are matched against the bucket for their
HTTP method in registration order.
"""
