"""Built-in CLI sub-commands that live outside :mod:`swagen.app`.

* :mod:`~swagen.commands.init` -- ``swagen init``, writes a starter
  ``swagen.config.json``.
"""
