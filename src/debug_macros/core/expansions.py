"""
Expansion Builders.

One builder per macro. Each validates its call, builds the terminal
diagnostic call, and registers a pending expansion whose guard chain depends
on the macro:

- ``assert(...)`` guards on every identifier argument, so the assertion only
  runs once the values it mentions are defined.
- ``warn(...)`` guards on nothing but the debug flag.
- ``deprecate(message, predicate, meta)`` guards on ``predicate``, and is
  deleted outright once the package version reaches ``meta.until``.

All validation happens before the first tree mutation.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from debug_macros.config import MacroConfig
from debug_macros.core.errors import DeprecationMetaError, MacroArgumentError
from debug_macros.core.guard import ExpansionRegistry, build_logical_guard
from debug_macros.core.host import Node, Site, TreeHost
from debug_macros.core.targets import create_helper_call
from debug_macros.core.versions import satisfies

logger = logging.getLogger(__name__)


@dataclass
class ExpansionContext:
  """Everything a builder needs for one module."""

  host: TreeHost
  config: MacroConfig
  registry: ExpansionRegistry


@dataclass(frozen=True)
class DeprecationMeta:
  """
  Metadata of a ``deprecate`` call.

  Attributes:
      id: Unique identifier of the deprecation.
      until: npm version range from which the deprecated code must be gone.
      url: Optional page with more information.
  """

  id: str
  until: str
  url: Optional[str] = None

  @classmethod
  def from_properties(cls, properties: Dict[str, Any]) -> "DeprecationMeta":
    """
    Reads ``id``, ``until`` and ``url``; any other key is ignored.

    Raises:
        DeprecationMetaError: If ``id`` or ``until`` is missing or empty.
    """
    for field in ("id", "until"):
      if not properties.get(field):
        raise DeprecationMetaError(field)
    url = properties.get("url")
    return cls(
      id=str(properties["id"]),
      until=str(properties["until"]),
      url=str(url) if url else None,
    )


def format_deprecation_message(message: str, meta: DeprecationMeta) -> str:
  """
  Renders the text passed to the deprecation helper.

  >>> format_deprecation_message("Foo is bad", DeprecationMeta("foo-dep", ">=2.0.0"))
  'DEPRECATED [foo-dep]: Foo is bad. Will be removed in >=2.0.0.'
  """
  text = f"DEPRECATED [{meta.id}]: {message}. Will be removed in {meta.until}."
  if meta.url:
    text += f" See {meta.url} for more information."
  return text


def identifier_arguments(host: TreeHost, arguments: List[Node]) -> List[Node]:
  return [arg for arg in arguments if host.is_identifier(arg)]


def expand_assert(ctx: ExpansionContext, site: Site, call: Node) -> None:
  host = ctx.host
  arguments = host.call_arguments(call)
  terminal = create_helper_call(host, ctx.config, "assert", arguments)
  # The identifiers also stay in the terminal call.
  conditions = [host.clone(arg) for arg in identifier_arguments(host, arguments)]
  ctx.registry.register(site, build_logical_guard(host, conditions, terminal))


def expand_warn(ctx: ExpansionContext, site: Site, call: Node) -> None:
  host = ctx.host
  terminal = create_helper_call(host, ctx.config, "warn", host.call_arguments(call))
  ctx.registry.register(site, build_logical_guard(host, [], terminal))


def expand_deprecate(ctx: ExpansionContext, site: Site, call: Node) -> None:
  """
  Expands ``deprecate(message, predicate, { id, until, url })``.

  If the configured package version satisfies ``until`` the statement is
  removed immediately and nothing is registered. Otherwise the call becomes
  ``guard && predicate && <helper>("DEPRECATED [id]: ...")``.

  Raises:
      MacroArgumentError: On missing arguments, a non-string message or a non-object meta.
      DeprecationMetaError: If ``id`` or ``until`` is missing.
  """
  host = ctx.host
  arguments = host.call_arguments(call)
  line = host.line_of(call)

  if len(arguments) < 3:
    raise MacroArgumentError("deprecate", f"expected (message, predicate, meta), got {len(arguments)} argument(s)", line)

  message_node, predicate, meta_node = arguments[:3]
  properties = host.static_properties(meta_node)
  if properties is None:
    raise MacroArgumentError("deprecate", "meta information must be an object literal", line)

  meta = DeprecationMeta.from_properties(properties)

  message = host.string_value(message_node)
  if message is None:
    raise MacroArgumentError("deprecate", "message must be a string literal", line)

  if ctx.config.package_version and satisfies(ctx.config.package_version, meta.until):
    logger.debug("Removing expired deprecation %s (until %s)", meta.id, meta.until)
    host.remove(site)
    return

  text = host.literal(format_deprecation_message(message, meta))
  terminal = create_helper_call(host, ctx.config, "deprecate", [text])
  ctx.registry.register(site, build_logical_guard(host, [predicate], terminal))
