"""Line classifiers for the merry lexer.

Each classifier is a mixin that decides whether a line matches one
block pattern. Classifiers do not move the lexer position.
"""

from merry.lexer.classifiers.directive import DirectiveClassifierMixin
from merry.lexer.classifiers.fence import FenceClassifierMixin
from merry.lexer.classifiers.heading import HeadingClassifierMixin
from merry.lexer.classifiers.list import ListClassifierMixin

__all__ = [
    "DirectiveClassifierMixin",
    "FenceClassifierMixin",
    "HeadingClassifierMixin",
    "ListClassifierMixin",
]
