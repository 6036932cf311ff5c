"""Githook result routing — fans a finished job out to its configured sinks.

Sinks are pluggable destinations: the S3 object store, SMTP email, or any
object implementing the ``LogSink`` protocol.  Recording sinks run first so
that notification sinks can link to what they stored.
"""
