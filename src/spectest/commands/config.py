"""Config command -- show the effective configuration.

``spectest config`` prints the configuration spectest would use right now,
after environment overrides, as JSON on stdout. Settings live in
``config.json`` in the spectest config directory::

    {
      "completion": {
        "auto_configure": true,
        "install_dir": null
      }
    }
"""

from __future__ import annotations

import json

import typer

from spectest.exceptions import ConfigError
from spectest.output import error, info, print_data


def config_command() -> None:
    """Show the effective configuration.

    Example::

        spectest config
        SPECTEST_COMPLETION_AUTO_CONFIGURE=0 spectest config
    """
    from spectest.config import get_config_dir, resolve_config

    try:
        config = resolve_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)

    info(f"Config directory: {get_config_dir()}")
    print_data(json.dumps(config.model_dump(mode="json"), indent=2))
