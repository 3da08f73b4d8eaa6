"""Built-in CLI sub-commands for spectest.

* :mod:`~spectest.commands.completion` -- the ``completion`` group
  (``generate``, ``install``, ``uninstall``) and the hidden ``__complete``
  data command queried by generated scripts.
* :mod:`~spectest.commands.config` -- show the effective configuration.

Multi-command groups export a :class:`typer.Typer` sub-application; single
commands export a plain function registered on the root app.
"""
