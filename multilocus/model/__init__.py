# -*- coding: utf-8 -*-
# flake8: noqa


from .partition import *
from .matrix import *
