# -*- coding: utf-8 -*-
"""Character scanners for tokenizing text sources.

A scanner hides raw character access behind a small set of primitives
(:meth:`Scanner.get_char`, :meth:`Scanner.goto`,
:meth:`Scanner.get_position` and :meth:`Scanner.has_more`) and layers
comment stripping, line-ending detection and token extraction on top of
them. Concrete scanners only implement the primitives.

"""
import logging


from multilocus.errors import EndOfSourceError, UnterminatedCommentError, \
    CommentConfigError


logger = logging.getLogger(__name__)
debug = logger.debug


__all__ = ['Scanner', 'StringScanner', 'StreamScanner', 'LINE_ENDING_UNKNOWN',
           'LINE_ENDING_LF', 'LINE_ENDING_CR', 'LINE_ENDING_LFCR',
           'LINE_ENDING_CRLF']


LINE_ENDING_UNKNOWN = 'unknown'

# unix
LINE_ENDING_LF = 'lf'

# classic mac
LINE_ENDING_CR = 'cr'

LINE_ENDING_LFCR = 'lfcr'

# windows
LINE_ENDING_CRLF = 'crlf'

DEFAULT_SPACE = ' \r\n\t'

DIGITS = '0123456789'

TERMINATORS = '\r\n'


class Scanner(object):
    """Base class for scanners.

    Parameters
    ----------
    comment_start : string, optional
        Delimiter opening a block comment. Empty to disable.
    comment_stop : string, optional
        Delimiter closing a block comment.
    line_comment : string, optional
        Delimiter opening a comment that runs to the end of the line. Empty
        to disable.
    comments_as_space : bool, optional
        If True, each comment reads as a single space, otherwise comments
        are skipped transparently.
    space : string, optional
        Characters treated as whitespace.

    """

    def __init__(self, comment_start='/*', comment_stop='*/', line_comment='',
                 comments_as_space=True, space=DEFAULT_SPACE):
        self.comment_start = comment_start
        self.comment_stop = comment_stop
        self.line_comment = line_comment
        self.comments_as_space = comments_as_space
        self.space = space
        self._line_ending = None

    # primitives, implemented by subclasses

    def get_char(self):
        """Consume and return the next raw character, or None at the end."""
        raise NotImplementedError

    def goto(self, position):
        raise NotImplementedError

    def get_position(self):
        raise NotImplementedError

    def has_more(self):
        raise NotImplementedError

    def start_position(self):
        raise NotImplementedError

    # configuration

    def set_comments(self, start, stop):
        self.comment_start = start
        self.comment_stop = stop

    def set_line_comment(self, start):
        self.line_comment = start

    # position control

    def rewind(self):
        self.goto(self.start_position())

    def wind_to_end(self):
        while self.get_char() is not None:
            pass

    # comments

    def is_delimiter(self, delim):
        """Does the raw text at the current position begin with `delim`? The
        position is left unchanged."""
        if not delim:
            return False
        start = self.get_position()
        try:
            for expect in delim:
                if self.get_char() != expect:
                    return False
            return True
        finally:
            self.goto(start)

    def _skip_block_comment(self):
        if not self.comment_stop:
            raise CommentConfigError('comment start %r has no stop delimiter' %
                                     self.comment_start)
        for _ in self.comment_start:
            self.get_char()
        while True:
            if not self.has_more():
                raise UnterminatedCommentError('unterminated comment',
                                               line=self.line_index())
            if self.is_delimiter(self.comment_stop):
                for _ in self.comment_stop:
                    self.get_char()
                return
            self.get_char()

    def _skip_line_comment(self):
        # the terminator itself is left in place
        for _ in self.line_comment:
            self.get_char()
        while self.has_more():
            start = self.get_position()
            if self.get_char() in TERMINATORS:
                self.goto(start)
                return

    # characters

    def read_char(self):
        """Consume and return the next meaningful character, or None if the
        source is exhausted. Comments are skipped, or read as a single space
        if `comments_as_space` is set."""
        while True:
            if not self.has_more():
                return None
            if self.comment_start and self.is_delimiter(self.comment_start):
                self._skip_block_comment()
            elif self.line_comment and self.is_delimiter(self.line_comment):
                self._skip_line_comment()
            else:
                return self.get_char()
            if self.comments_as_space:
                return ' '

    def peek_char(self):
        start = self.get_position()
        c = self.read_char()
        self.goto(start)
        return c

    def _peek_raw(self):
        start = self.get_position()
        c = self.get_char()
        self.goto(start)
        return c

    # line endings

    @property
    def line_ending(self):
        if self._line_ending is None:
            self.detect_line_ending()
        return self._line_ending

    def detect_line_ending(self):
        """Find the first line terminator in the source and classify it. The
        result is cached and the scan position is restored.

        Returns
        -------
        line_ending : string
            One of the LINE_ENDING_* constants.

        """
        start = self.get_position()
        try:
            self.rewind()
            ending = LINE_ENDING_UNKNOWN
            while True:
                c = self.get_char()
                if c is None:
                    break
                if c == '\n':
                    ending = LINE_ENDING_LFCR if self.get_char() == '\r' \
                        else LINE_ENDING_LF
                    break
                if c == '\r':
                    ending = LINE_ENDING_CRLF if self.get_char() == '\n' \
                        else LINE_ENDING_CR
                    break
        finally:
            self.goto(start)
        debug('detected line ending: %s', ending)
        self._line_ending = ending
        return ending

    def line_index(self):
        """Return the 1-based line number of the current position.

        This rewinds and counts terminators up to the current position, so
        it is meant for error reporting rather than use inside scanning
        loops.

        """
        start = self.get_position()
        n_cr = n_lf = 0
        try:
            self.rewind()
            while self.get_position() != start:
                c = self.get_char()
                if c is None:
                    break
                if c == '\r':
                    n_cr += 1
                elif c == '\n':
                    n_lf += 1
        finally:
            self.goto(start)
        ending = self.line_ending
        if ending in (LINE_ENDING_CR, LINE_ENDING_CRLF):
            return n_cr + 1
        if ending in (LINE_ENDING_LF, LINE_ENDING_LFCR):
            return n_lf + 1
        return max(n_cr, n_lf) + 1

    # tokens

    def read_until(self, stops, eat=False, required=False):
        """Accumulate characters up to the first character in `stops`.

        Parameters
        ----------
        stops : string
            Set of stop characters.
        eat : bool, optional
            If True, consume the stop character.
        required : bool, optional
            If True, raise if the source runs out before a stop character.

        Returns
        -------
        token : string
        stop : string or None
            The stop character found, or None if the source was exhausted.

        """
        chars = []
        while True:
            start = self.get_position()
            c = self.read_char()
            if c is None:
                if required:
                    raise EndOfSourceError(
                        'source exhausted before any of %r' % stops,
                        line=self.line_index()
                    )
                return ''.join(chars), None
            if c in stops:
                if not eat:
                    self.goto(start)
                return ''.join(chars), c
            chars.append(c)

    def read_while(self, chars):
        token = []
        while True:
            start = self.get_position()
            c = self.read_char()
            if c is None:
                break
            if c not in chars:
                self.goto(start)
                break
            token.append(c)
        return ''.join(token)

    def read_one_of(self, chars):
        start = self.get_position()
        c = self.read_char()
        if c is not None and c in chars:
            return c
        self.goto(start)
        return ''

    def consume_space(self):
        self.read_while(self.space)

    def read_token(self, extra=''):
        """Skip leading whitespace and read up to the next whitespace or
        `extra` delimiter."""
        self.consume_space()
        token, _ = self.read_until(self.space + extra)
        return token

    def at_token(self, token):
        start = self.get_position()
        try:
            for expect in token:
                if self.read_char() != expect:
                    return False
            return True
        finally:
            self.goto(start)

    def _consume_terminator(self, c):
        ending = self.line_ending
        if c == '\r' and ending == LINE_ENDING_CRLF and self._peek_raw() == '\n':
            self.get_char()
        elif c == '\n' and ending == LINE_ENDING_LFCR and self._peek_raw() == '\r':
            self.get_char()

    def read_line(self, eat_space=False):
        """Read through the end of the current line, returning the line
        without its terminator."""
        if eat_space:
            self.consume_space()
        line, stop = self.read_until(TERMINATORS, eat=True)
        if stop is not None:
            self._consume_terminator(stop)
        return line

    def consume_line(self):
        self.read_line()

    def at_line_end(self):
        c = self.peek_char()
        return c is None or c in TERMINATORS

    def read_whole(self):
        chars = []
        while True:
            c = self.read_char()
            if c is None:
                return ''.join(chars)
            chars.append(c)

    def read_int_token(self):
        """Read an optionally signed run of digits. Anything following is
        left unconsumed."""
        sign = self.read_one_of('+-')
        return sign + self.read_while(DIGITS)

    def read_number_token(self):
        token = self.read_int_token()
        point = self.read_one_of('.')
        if point:
            token += point + self.read_while(DIGITS)
        return token


class StringScanner(Scanner):
    """Scanner over an in-memory string.

    Parameters
    ----------
    text : string
        Text to scan.
    **kwargs
        Passed through to :class:`Scanner`.

    Examples
    --------

    >>> from multilocus.io.scanner import StringScanner
    >>> s = StringScanner('ab/*xyz*/cd', comments_as_space=False)
    >>> s.read_token()
    'abcd'

    """

    def __init__(self, text, **kwargs):
        super(StringScanner, self).__init__(**kwargs)
        self._text = text
        self._pos = 0

    def get_char(self):
        if self._pos >= len(self._text):
            return None
        c = self._text[self._pos]
        self._pos += 1
        return c

    def goto(self, position):
        if not 0 <= position <= len(self._text):
            raise IndexError('position out of range: %r' % position)
        self._pos = position

    def get_position(self):
        return self._pos

    def has_more(self):
        return self._pos < len(self._text)

    def start_position(self):
        return 0

    def wind_to_end(self):
        self._pos = len(self._text)


class StreamScanner(Scanner):
    """Scanner over a seekable text stream, e.g., a file opened in text mode
    with ``newline=''`` so that line terminators are seen unchanged.

    Positions are whatever the stream's ``tell()`` returns; they can be
    passed back to :meth:`goto` but should not be used in arithmetic.

    """

    def __init__(self, stream, **kwargs):
        super(StreamScanner, self).__init__(**kwargs)
        if not stream.seekable():
            raise ValueError('stream is not seekable')
        self._stream = stream
        self._start = stream.tell()

    def get_char(self):
        c = self._stream.read(1)
        return c if c else None

    def goto(self, position):
        self._stream.seek(position)

    def get_position(self):
        return self._stream.tell()

    def has_more(self):
        start = self._stream.tell()
        c = self._stream.read(1)
        self._stream.seek(start)
        return bool(c)

    def start_position(self):
        return self._start

    def wind_to_end(self):
        self._stream.seek(0, 2)
