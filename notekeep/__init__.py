"""
NoteKeep.

- backend/: Identity, session and note/folder storage services with the HTTP API
"""
