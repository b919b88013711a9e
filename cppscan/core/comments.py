from enum import Enum, auto
import logging

from .diagnostics import DiagnosticEngine, line_error
from ..errors import UnterminatedCommentError

logger = logging.getLogger(__name__)


class StripMode(Enum):
    NORMAL = auto()
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()


class CommentStripper:
    """Removes // and /* */ comments while keeping line numbering stable.

    Newlines inside removed spans are kept as bare newlines. String and
    character literals are copied verbatim so a ``//`` inside quotes is not
    taken for a comment.
    """

    def __init__(self, diagnostics: DiagnosticEngine):
        self.diagnostics = diagnostics

    def strip(self, code: str) -> str:
        out = []
        mode = StripMode.NORMAL
        line = 1
        block_start = 0
        quote = None
        i = 0
        n = len(code)

        while i < n:
            ch = code[i]
            pair = code[i:i + 2]

            if mode == StripMode.BLOCK_COMMENT:
                if pair == '*/':
                    mode = StripMode.NORMAL
                    i += 2
                    continue
                if pair == '/*':
                    # stays inside the same comment; one close is enough
                    self.diagnostics.report(line_error(
                        line, "Error - Nested comments are not allowed in C++."))
                    i += 2
                    continue
                if ch == '\n':
                    out.append('\n')
                    line += 1
                i += 1
                continue

            if mode == StripMode.LINE_COMMENT:
                if ch == '\n':
                    mode = StripMode.NORMAL
                    out.append('\n')
                    line += 1
                i += 1
                continue

            if quote is not None:
                out.append(ch)
                if ch == '\\' and i + 1 < n and code[i + 1] != '\n':
                    out.append(code[i + 1])
                    i += 2
                    continue
                if ch == quote or ch == '\n':
                    quote = None
                    if ch == '\n':
                        line += 1
                i += 1
                continue

            if pair == '/*':
                mode = StripMode.BLOCK_COMMENT
                block_start = line
                i += 2
                continue
            if pair == '//':
                mode = StripMode.LINE_COMMENT
                i += 2
                continue

            if ch in ('"', "'"):
                quote = ch
            elif ch == '\n':
                line += 1
            out.append(ch)
            i += 1

        if mode == StripMode.BLOCK_COMMENT:
            logger.debug("Block comment opened at line %d never closes", block_start)
            raise UnterminatedCommentError(block_start)

        return ''.join(out)
