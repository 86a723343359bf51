"""Server-rendered publishing UI.

- public entry pages at /{slug}
- admin editor, preview and library behind a session cookie
- plain HTML forms + redirects
"""
