# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import os
from pathlib import Path

from jinja2 import Environment
from jinja2 import FileSystemLoader
from jinja2 import StrictUndefined


class Templates:
    """Render file contents for the declared files.

    Bundled templates live next to this module. Application templates
    live in the application tree and are optional.
    """

    def __init__(self, app_root: os.PathLike):
        self._app_root = Path(app_root)
        self._environment = Environment(
            loader=FileSystemLoader(str(_bundled_dir)),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
            )

    def __repr__(self):
        return f'{Templates.__name__}({str(self._app_root)!r})'

    def render(self, name: str, **context) -> str:
        _logger.debug("Render bundled template %s", name)
        return self._environment.get_template(name).render(**context)

    def local_template(self, name: str) -> Path:
        return self._app_root / 'app' / 'manifests' / 'templates' / name

    def render_local(self, path: Path, **context) -> str:
        _logger.debug("Render application template %s", path)
        template = self._environment.from_string(path.read_text(encoding='utf-8'))
        return template.render(**context)


_bundled_dir = Path(__file__).with_name('templates')

_logger = logging.getLogger(__name__)
