# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""A single entrypoint into the mountstats commands.

This file is intentionally lightweight and should not include any complex logic.
"""

import click

from mountstats._version import __version__
from mountstats.monitoring.cli import show
from mountstats.monitoring.click import toml_config_option


@click.group(
    epilog=f"mountstats Version: {__version__}",
    context_settings={"obj": show.CliObjectImpl()},
)
@toml_config_option("mountstats")
@click.version_option(__version__)
def main() -> None:
    """Decode Linux per-process mount statistics, including NFS client counters."""


main.add_command(show.main, name="show")

if __name__ == "__main__":
    main()
