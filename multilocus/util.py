# -*- coding: utf-8 -*-
from contextlib import contextmanager
import numbers


import numpy as np


from multilocus.errors import DomainError


@contextmanager
def ignore_invalid():
    err = np.seterr(invalid='ignore', divide='ignore')
    try:
        yield
    finally:
        np.seterr(**err)


def asarray_ndim(a, *ndims, **kwargs):
    """Ensure numpy array.

    Parameters
    ----------
    a : array_like
    *ndims : int, optional
        Allowed values for number of dimensions.
    **kwargs
        Passed through to :func:`numpy.asarray`.

    Returns
    -------
    a : numpy.ndarray

    """
    allow_none = kwargs.pop('allow_none', False)
    if a is None and allow_none:
        return None
    a = np.asarray(a, **kwargs)
    if a.ndim not in ndims:
        if len(ndims) > 1:
            expect_str = 'one of %s' % str(ndims)
        else:
            expect_str = '%s' % ndims[0]
        raise TypeError('bad number of dimensions: expected %s; found %s' %
                        (expect_str, a.ndim))
    return a


def check_ploidy(actual, expect):
    if expect != actual:
        raise DomainError(
            'expected ploidy %s, found %s' % (expect, actual)
        )


def check_min_isolates(actual, expect):
    if actual < expect:
        raise DomainError(
            'expected at least %s isolates, found %s' % (expect, actual)
        )


def check_min_loci(actual, expect):
    if actual < expect:
        raise DomainError(
            'expected at least %s loci, found %s' % (expect, actual)
        )


def check_min_populations(actual, expect):
    if actual < expect:
        raise DomainError(
            'expected at least %s populations, found %s' % (expect, actual)
        )


def get_random_state(random_state=None):
    """Obtain a :class:`numpy.random.RandomState`.

    Parameters
    ----------
    random_state : None, int or RandomState, optional
        If None, a freshly seeded generator is returned. If an int, a
        generator seeded with that value. A RandomState is returned as is.

    Returns
    -------
    rs : numpy.random.RandomState

    """
    if random_state is None:
        return np.random.RandomState()
    if isinstance(random_state, np.random.RandomState):
        return random_state
    if isinstance(random_state, numbers.Integral):
        return np.random.RandomState(random_state)
    raise TypeError('bad random_state, expected None, int or RandomState; found %r'
                    % type(random_state))
