"""Line tokenizer — one input line to a command keyword and its arguments.

Statement grammar::

    command arg1, arg2, ..., argN [= &varname]   # comment

The tokenizer is a three-state machine (command, arguments, object
binding). Each argument is trimmed and, unless the command is exempt, run
through the substitution callback before it is stored.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from nanocad.domain.errors import LineSyntaxError

COMMENT = "#"
SEPARATOR = ","
BIND = "="
BLANKS = frozenset(" \t")

DEFAULT_COMMAND_MAX_SIZE = 15
DEFAULT_ARGUMENT_MAX_SIZE = 64
DEFAULT_MAX_ARGUMENTS = 8

Substitute = Callable[[str, str], tuple[str, int]]


class _State(Enum):
    COMMAND = auto()
    ARGUMENTS = auto()
    SET_OBJECT_VAR = auto()


@dataclass(frozen=True)
class TokenizerLimits:
    command_max_size: int = DEFAULT_COMMAND_MAX_SIZE
    argument_max_size: int = DEFAULT_ARGUMENT_MAX_SIZE
    max_arguments: int = DEFAULT_MAX_ARGUMENTS


@dataclass(frozen=True)
class ParsedLine:
    """Result of tokenizing one line.

    An empty ``command`` means a blank or comment-only line.
    """

    command: str
    arguments: tuple[str, ...] = ()
    substitutions: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.command


def _no_substitution(command: str, arg: str) -> tuple[str, int]:
    return arg, 0


class _Tokenizer:
    def __init__(self, line: str, substitute: Substitute, limits: TokenizerLimits) -> None:
        self.line = line
        self.substitute = substitute
        self.limits = limits
        self.state = _State.COMMAND
        self.command: list[str] = []
        self.buffer: list[str] = []
        self.arguments: list[str] = []
        self.substitutions = 0
        self.after_separator = False
        self.binding_done = False

    def error(self, message: str, pos: int) -> LineSyntaxError:
        return LineSyntaxError(message, position=pos, detail={"line": self.line})

    def finish_argument(self, pos: int, *, substitute: bool = True) -> None:
        text = "".join(self.buffer).strip()
        self.buffer.clear()
        if not text:
            raise self.error("Empty argument", pos)
        if len(self.arguments) >= self.limits.max_arguments:
            raise self.error(
                f"Maximum number of arguments ({self.limits.max_arguments}) exceeded", pos
            )
        if substitute:
            text, count = self.substitute("".join(self.command), text)
            self.substitutions += count
        self.arguments.append(text)

    def feed(self, pos: int, char: str) -> None:
        match self.state:
            case _State.COMMAND:
                if char in BLANKS:
                    if self.command:
                        self.state = _State.ARGUMENTS
                elif len(self.command) >= self.limits.command_max_size:
                    raise self.error(
                        f"Command maximum character limit ({self.limits.command_max_size}) "
                        "exceeded",
                        pos,
                    )
                else:
                    self.command.append(char)

            case _State.ARGUMENTS:
                if char == SEPARATOR:
                    self.finish_argument(pos)
                    self.after_separator = True
                elif char == BIND:
                    self.finish_argument(pos)
                    self.after_separator = False
                    self.state = _State.SET_OBJECT_VAR
                elif char in BLANKS and not self.buffer:
                    pass
                elif len(self.buffer) >= self.limits.argument_max_size:
                    raise self.error(
                        f"Maximum argument character size ({self.limits.argument_max_size}) "
                        f"exceeded on argument number {len(self.arguments) + 1}",
                        pos,
                    )
                else:
                    self.buffer.append(char)
                    self.after_separator = False

            case _State.SET_OBJECT_VAR:
                if char in BLANKS:
                    if self.buffer:
                        self.binding_done = True
                elif self.binding_done:
                    raise self.error(f"Unexpected '{char}' after object variable", pos)
                elif not self.buffer and char != "&":
                    raise self.error(
                        f"Unknown first character for an object variable '{char}'", pos
                    )
                elif len(self.buffer) >= self.limits.argument_max_size:
                    raise self.error("Object variable name too long", pos)
                else:
                    self.buffer.append(char)

    def run(self) -> ParsedLine:
        end = len(self.line)
        for pos, char in enumerate(self.line):
            if char == COMMENT:
                end = pos
                break
            self.feed(pos, char)

        match self.state:
            case _State.ARGUMENTS:
                if self.buffer:
                    self.finish_argument(end)
                elif self.after_separator:
                    raise self.error("Trailing ',' without an argument", end)
            case _State.SET_OBJECT_VAR:
                if len(self.buffer) < 2:
                    raise self.error("Missing object variable name after '='", end)
                self.finish_argument(end, substitute=False)
            case _State.COMMAND:
                pass

        return ParsedLine(
            command="".join(self.command),
            arguments=tuple(self.arguments),
            substitutions=self.substitutions,
        )


def tokenize(
    line: str,
    substitute: Substitute | None = None,
    limits: TokenizerLimits | None = None,
) -> ParsedLine:
    """Split *line* into command and arguments.

    Args:
        line: One statement, without its trailing newline.
        substitute: ``(command, arg) -> (new_arg, count)`` applied to every
            argument except the ``= &var`` binding. Exempt commands are the
            callback's concern.
        limits: Size limits; defaults to :class:`TokenizerLimits`.

    Raises:
        LineSyntaxError: Overflow of a size limit, an empty argument, or a
            malformed ``= &var`` binding. ``position`` is the column.
    """
    tokenizer = _Tokenizer(
        line.rstrip("\r\n"),
        substitute or _no_substitution,
        limits or TokenizerLimits(),
    )
    return tokenizer.run()
