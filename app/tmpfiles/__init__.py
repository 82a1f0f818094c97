"""mini-tmpfiles - parser for tmpfiles.d-style file lifecycle configuration.

Each configuration line names a target path, an action to perform on it,
and optional mode, ownership, age and argument fields. This package turns
those lines into validated, span-tagged records.
"""

__version__ = "0.1.0"
