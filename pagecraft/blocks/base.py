"""Contract shared by every custom template block.

A block extension is a :class:`jinja2.ext.Extension` registered for one start
tag (``{% equation %}``) and its end tag (``{% endequation %}``). The body
between the tags is wrapped in ``{% raw %}`` while the template is
preprocessed, so it reaches :meth:`BlockExtension.build` as literal source
and is never evaluated as nested template syntax.

Parsing happens in two phases. :meth:`BlockExtension.build` is pure: it
returns a :class:`BlockResult` pairing the :class:`RenderableNode` to embed
with any :class:`PendingEffect` it wants applied (for example writing a
generated image). The environment's effect sink then either applies those
effects straight away (:class:`ApplyEffects`, the default) or records them
for a later phase or a dry run (:class:`CollectEffects`).

Example
-------
>>> from jinja2 import Environment
>>> from pagecraft.blocks import EquationBlock
>>> env = Environment(extensions=[EquationBlock])
>>> "<math" in env.from_string("{% equation %}x^2{% endequation %}").render()
True
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import threading
import typing as typ
import weakref
from pathlib import Path

from jinja2 import TemplateSyntaxError, nodes
from jinja2.ext import Extension

from pagecraft.errors import RenderError, ResourceError, StructuralError

if typ.TYPE_CHECKING:
    from jinja2 import Environment
    from jinja2.lexer import Token
    from jinja2.parser import Parser

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class BlockArgument:
    """One argument of a block tag; string literals arrive unquoted."""

    value: str
    quoted: bool = False


@dc.dataclass(frozen=True, slots=True)
class BlockInvocation:
    """Everything a block receives when its tag is encountered.

    Attributes
    ----------
    tag_name : str
        Start tag of the block, such as ``"equation"``.
    arguments : tuple[BlockArgument, ...]
        Arguments in source order.
    raw_inner_text : str
        Literal body between the start and end tags.
    lineno : int
        Line of the start tag in the template source.
    name : str or None
        Template name, when the template was loaded by name.
    filename : str or None
        Template filename, when known.
    """

    tag_name: str
    arguments: tuple[BlockArgument, ...]
    raw_inner_text: str
    lineno: int = 0
    name: str | None = None
    filename: str | None = None

    def error(self, message: str) -> StructuralError:
        """Return a :class:`StructuralError` located at this invocation."""
        return StructuralError(
            f"{self.tag_name}: {message}",
            self.lineno,
            self.name,
            self.filename,
            tag=self.tag_name,
        )

    def fail(self, message: str) -> typ.NoReturn:
        """Raise :meth:`error` for ``message``."""
        raise self.error(message)


@dc.dataclass(frozen=True, slots=True)
class RenderableNode:
    """Markup produced once at parse time and written on every render."""

    markup: str

    def render(self, context: typ.Mapping[str, typ.Any] | None = None) -> str:
        """Return the cached markup; the runtime context is not consulted."""
        return self.markup

    def to_jinja(self, lineno: int) -> nodes.Output:
        """Return the compiled-template node that emits the cached markup."""
        return nodes.Output([nodes.TemplateData(self.markup)], lineno=lineno)


class PendingEffect(typ.Protocol):
    """Side effect requested by a block during parsing."""

    def describe(self) -> str:
        """Return a short human-readable summary of the effect."""
        ...

    def apply(self) -> None:
        """Perform the effect, raising :class:`ResourceError` on failure."""
        ...


class _PathLock:
    """Mutex for one resolved path, dropped once no writer holds it."""

    __slots__ = ("__weakref__", "_lock")

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def __enter__(self) -> _PathLock:
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._lock.release()


_PATH_LOCKS: weakref.WeakValueDictionary[Path, _PathLock] = (
    weakref.WeakValueDictionary()
)
_PATH_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> _PathLock:
    with _PATH_LOCKS_GUARD:
        lock = _PATH_LOCKS.get(path)
        if lock is None:
            lock = _PathLock()
            _PATH_LOCKS[path] = lock
        return lock


@dc.dataclass(frozen=True, slots=True)
class FileWrite:
    """Write ``content`` to ``path``, creating parent directories as needed.

    Writes to the same resolved path are serialised within the process. The
    lock for a path only lives while some write to it is in progress.
    Concurrent builds in separate processes must still target distinct paths.
    """

    path: Path
    content: str

    def describe(self) -> str:
        """Return a short human-readable summary of the write."""
        return f"write {self.path}"

    def apply(self) -> None:
        """Create parent directories and overwrite ``path`` with ``content``."""
        resolved = self.path.resolve()
        with _lock_for(resolved):
            try:
                resolved.parent.mkdir(parents=True, exist_ok=True)
                resolved.write_text(self.content, encoding="utf-8")
            except OSError as exc:
                msg = f"Unable to write '{self.path}': {exc}"
                raise ResourceError(msg, path=self.path) from exc
        logger.debug("Wrote %s", resolved)


@dc.dataclass(frozen=True, slots=True)
class BlockResult:
    """Outcome of parsing one block occurrence."""

    node: RenderableNode
    effects: tuple[PendingEffect, ...] = ()


class EffectSink(typ.Protocol):
    """Destination for effects produced while templates are parsed."""

    def submit(self, effects: typ.Sequence[PendingEffect]) -> None:
        """Accept the effects emitted by one block occurrence."""
        ...


class ApplyEffects:
    """Apply effects immediately, as part of parsing."""

    def submit(self, effects: typ.Sequence[PendingEffect]) -> None:
        """Apply each effect in order."""
        for effect in effects:
            effect.apply()


@dc.dataclass(slots=True)
class CollectEffects:
    """Record effects without touching the filesystem.

    Call :meth:`apply_all` to run the recorded effects in a separate phase,
    or inspect :attr:`effects` for a dry run.
    """

    effects: list[PendingEffect] = dc.field(default_factory=list)

    def submit(self, effects: typ.Sequence[PendingEffect]) -> None:
        """Record the effects for later."""
        self.effects.extend(effects)

    def apply_all(self) -> None:
        """Apply and clear every recorded effect."""
        pending, self.effects = self.effects, []
        for effect in pending:
            effect.apply()


class BlockExtension(Extension):
    """Base class for custom ``{% tag %}…{% endtag %}`` template blocks.

    Subclasses set :attr:`start_tag`, :attr:`end_tag`, and
    :attr:`max_arguments`, and implement :meth:`build`.
    """

    start_tag: typ.ClassVar[str]
    end_tag: typ.ClassVar[str]
    max_arguments: typ.ClassVar[int] = 0

    def __init__(self, environment: Environment) -> None:
        super().__init__(environment)
        environment.extend(block_effects=ApplyEffects())

    def __init_subclass__(cls, **kwargs: typ.Any) -> None:
        super().__init_subclass__(**kwargs)
        if "start_tag" in cls.__dict__:
            cls.tags = {cls.start_tag}

    def build(self, invocation: BlockInvocation) -> BlockResult:
        """Turn one block occurrence into a node and its pending effects."""
        raise NotImplementedError

    def preprocess(
        self, source: str, name: str | None, filename: str | None = None
    ) -> str:
        """Wrap each block body in ``raw`` so Jinja never interprets it."""
        return self._body_pattern().sub(self._wrap_raw, source)

    def parse(self, parser: Parser) -> nodes.Node:
        """Parse the tag, collect its literal body, and build the node."""
        lineno = next(parser.stream).lineno
        arguments: list[BlockArgument] = []
        while parser.stream.current.type != "block_end":
            token = next(parser.stream)
            if token.type == "comma":
                continue
            arguments.append(self._argument(parser, token))

        try:
            body = parser.parse_statements((f"name:{self.end_tag}",), drop_needle=True)
        except TemplateSyntaxError as exc:
            if isinstance(exc, StructuralError):
                raise
            raise StructuralError(
                f"{self.start_tag}: {exc.message}",
                exc.lineno,
                parser.name,
                parser.filename,
                tag=self.start_tag,
            ) from exc
        invocation = BlockInvocation(
            tag_name=self.start_tag,
            arguments=tuple(arguments),
            raw_inner_text="".join(
                data.data
                for output in body
                for data in output.find_all(nodes.TemplateData)
            ),
            lineno=lineno,
            name=parser.name,
            filename=parser.filename,
        )
        if len(invocation.arguments) > self.max_arguments:
            extra = invocation.arguments[self.max_arguments]
            invocation.fail(f"unexpected argument '{extra.value}'")

        logger.debug("Parsing %s block at line %d", self.start_tag, lineno)
        result = self.build(invocation)
        try:
            self.environment.block_effects.submit(result.effects)  # type: ignore[attr-defined]
        except RenderError as exc:
            raise invocation.error(str(exc)) from exc
        return result.node.to_jinja(lineno)

    def _argument(self, parser: Parser, token: Token) -> BlockArgument:
        """Return the argument carried by ``token``."""
        if token.type in {"name", "string", "integer", "float"}:
            return BlockArgument(str(token.value), quoted=token.type == "string")
        parser.fail(
            f"{self.start_tag}: unexpected token '{token.value}' in arguments",
            token.lineno,
            StructuralError,
        )

    def _body_pattern(self) -> re.Pattern[str]:
        env = self.environment
        begin = re.escape(env.block_start_string)
        end = re.escape(env.block_end_string)
        return re.compile(
            rf"(?P<open>{begin}[-+]?\s*{self.start_tag}\b.*?[-+]?{end})"
            rf"(?P<body>.*?)"
            rf"(?P<close>{begin}[-+]?\s*{self.end_tag}\s*[-+]?{end})",
            re.DOTALL,
        )

    def _wrap_raw(self, match: re.Match[str]) -> str:
        env = self.environment
        raw_open = f"{env.block_start_string} raw {env.block_end_string}"
        raw_close = f"{env.block_start_string} endraw {env.block_end_string}"
        return f"{match['open']}{raw_open}{match['body']}{raw_close}{match['close']}"


__all__ = [
    "ApplyEffects",
    "BlockArgument",
    "BlockExtension",
    "BlockInvocation",
    "BlockResult",
    "CollectEffects",
    "EffectSink",
    "FileWrite",
    "PendingEffect",
    "RenderableNode",
]
