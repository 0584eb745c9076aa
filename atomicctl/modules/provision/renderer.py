"""Docker engine unit file rendering.

The unit is rendered from templates/docker.service.j2 with the following context:
- engine: EngineOptions (storage driver, labels, registries, flags, env)
- auth: AuthOptions with the remote TLS certificate paths
- docker_port: TCP port the engine listens on

Rendering is pure: it performs no remote calls and never mutates its inputs.
List fields are emitted in input order, so identical inputs always produce
byte-identical output.
"""

import logging
import os

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
)

from .errors import RenderError
from .models import AuthOptions, EngineOptions

logger = logging.getLogger("atomicctl.provision.renderer")

ENGINE_TEMPLATE = 'docker.service.j2'

_ESCAPES = {
    '\a': '\\a',
    '\b': '\\b',
    '\f': '\\f',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\v': '\\v',
    '\\': '\\\\',
    '"': '\\"',
}


def quote(value) -> str:
    """Double-quote a value the way systemd Environment= entries expect.

    Backslashes, quotes and control characters are escaped; printable text
    (including non-ASCII) is kept as-is.
    """
    parts = []
    for ch in str(value):
        if ch in _ESCAPES:
            parts.append(_ESCAPES[ch])
        elif ch.isprintable():
            parts.append(ch)
        elif ord(ch) < 0x80:
            parts.append('\\x%02x' % ord(ch))
        elif ord(ch) <= 0xFFFF:
            parts.append('\\u%04x' % ord(ch))
        else:
            parts.append('\\U%08x' % ord(ch))
    return '"' + ''.join(parts) + '"'


def get_template_path() -> str:
    """Get the absolute path to the templates directory."""
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), 'templates')


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(get_template_path()),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )
    env.filters['quote'] = quote
    return env


def render_engine_config(
    engine_options: EngineOptions,
    auth_options: AuthOptions,
    docker_port: int,
    template_name: str = ENGINE_TEMPLATE,
) -> str:
    """Render the Docker engine systemd unit.

    Args:
        engine_options: Engine settings; the provider label must already be present
        auth_options: Remote certificate locations
        docker_port: TCP port for the engine API
        template_name: Template to render (default: docker.service.j2)

    Returns:
        str: Unit file text

    Raises:
        RenderError: If the template is missing, malformed or references an
            undefined variable
    """
    logger.debug(f"Rendering {template_name} for port {docker_port}")
    try:
        template = _environment().get_template(template_name)
        return template.render(
            engine=engine_options,
            auth=auth_options,
            docker_port=docker_port,
        )
    except TemplateNotFound as e:
        raise RenderError(f"Engine template not found: {e}") from e
    except TemplateSyntaxError as e:
        raise RenderError(f"Template syntax error: {e}") from e
    except UndefinedError as e:
        raise RenderError(f"Missing required template variable: {e}") from e
    except TemplateError as e:
        raise RenderError(f"Failed to render engine template: {e}") from e
