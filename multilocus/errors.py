# -*- coding: utf-8 -*-


class ParseError(ValueError):
    """Raised when text input cannot be parsed.

    Parameters
    ----------
    msg : string
        Description of the problem.
    line : int, optional
        1-based line number where the problem was detected.

    """

    def __init__(self, msg, line=None):
        self.msg = msg
        self.line = line
        super(ParseError, self).__init__(msg, line)

    def __str__(self):
        if self.line is None:
            return self.msg
        return 'line %s: %s' % (self.line, self.msg)


class EndOfSourceError(ParseError):
    """Raised when the source is exhausted before an expected token."""


class UnterminatedCommentError(ParseError):
    """Raised when a comment is still open at the end of the source."""


class FormatError(ParseError):
    """Raised when a data file does not follow the genotype table layout."""


class CommentConfigError(RuntimeError):
    """Raised when a comment start delimiter has no matching stop delimiter."""


class DomainError(ValueError):
    """Raised when the data do not satisfy the preconditions of a statistic."""
