"""Built-in CLI sub-commands for swaggen.

* :mod:`~swaggen.commands.generate` -- generate TypeScript clients from one
  document or from every source in ``swaggen.json``.
* :mod:`~swaggen.commands.init` -- write a starter ``swaggen.json``.

Each module exports a plain callback function registered directly on the
root app in :mod:`swaggen.app`.
"""
