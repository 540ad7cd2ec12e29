"""Jinja2 template loading with workspace override support."""

from __future__ import annotations

from pathlib import Path

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape


def build_template_environment(*, workspace: Path | None = None) -> Environment:
    """Build a Jinja2 environment with user overrides before packaged defaults.

    Overrides are read from ``templates/`` inside the workspace, so a user can
    restyle the page by editing their seeded copy of ``page.html.j2``.
    """

    loaders: list[BaseLoader] = []
    if workspace is not None:
        loaders.append(FileSystemLoader(str(workspace / "templates")))

    loaders.append(PackageLoader("magicsquare", "templates"))
    return Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(enabled_extensions=("html", "j2"), default_for_string=False),
        keep_trailing_newline=True,
    )
