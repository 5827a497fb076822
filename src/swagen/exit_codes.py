"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~swagen.exceptions.SwagenError` subclass.
External tooling (CI scripts, pre-commit hooks) can inspect the exit code
to tell a missing configuration apart from a failed profile without
parsing stderr.

Example::

    $ swagen generate
    $ echo $?
    4   # EXIT_PROFILE_FAILURE -- at least one profile did not produce output
"""

EXIT_SUCCESS = 0
"""Every non-skipped profile produced its artifact."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_CONFIG_NOT_FOUND = 3
"""No usable configuration file was found in the working directory."""

EXIT_PROFILE_FAILURE = 4
"""One or more profiles failed; the others were still processed."""
