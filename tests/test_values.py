"""Unit tests for the undefined sentinel and the value classifier."""

import copy
import functools
import pickle

import pytest

from structclone.values import UNDEFINED
from structclone.values import Undefined
from structclone.values import classify_value


class Tagged(str):
    pass


class Counter(int):
    pass


class TestUndefined:
    """Tests for the undefined sentinel."""

    def test_singleton(self):
        """Constructing Undefined always returns the shared instance."""
        assert Undefined() is UNDEFINED

    def test_falsy_and_repr(self):
        """UNDEFINED is falsy and has a readable repr."""
        assert not UNDEFINED
        assert repr(UNDEFINED) == "UNDEFINED"

    def test_identity_survives_copy_and_pickle(self):
        """Copies and pickles resolve back to the same instance."""
        assert copy.copy(UNDEFINED) is UNDEFINED
        assert copy.deepcopy([UNDEFINED])[0] is UNDEFINED
        assert pickle.loads(pickle.dumps(UNDEFINED)) is UNDEFINED

    def test_distinct_from_none(self):
        """UNDEFINED is not None and does not equal None."""
        assert UNDEFINED is not None
        assert UNDEFINED != None  # noqa: E711


class TestClassifyValue:
    """Tests for classify_value()."""

    @pytest.mark.parametrize(
        "value, kind",
        [
            (None, "null"),
            (UNDEFINED, "undefined"),
            (True, "boolean"),
            (False, "boolean"),
            (0, "number"),
            (-2.5, "number"),
            ("", "string"),
            ([], "array"),
            ({}, "object"),
        ],
    )
    def test_basic_kinds(self, value, kind):
        """Each basic value maps to its kind."""
        assert classify_value(value) == kind

    def test_bool_is_not_number(self):
        """Booleans are classified before numbers even though bool subclasses int."""
        assert classify_value(True) == "boolean"

    def test_primitive_subclasses_are_objects(self):
        """Instances of str/int subclasses go through the object path."""
        assert classify_value(Tagged("x")) == "object"
        assert classify_value(Counter(3)) == "object"

    def test_functions(self):
        """Functions, lambdas, methods, builtins, classes and partials are functions."""

        def plain():
            pass

        assert classify_value(plain) == "function"
        assert classify_value(lambda: None) == "function"
        assert classify_value("abc".upper) == "function"
        assert classify_value(len) == "function"
        assert classify_value(Tagged) == "function"
        assert classify_value(functools.partial(plain)) == "function"

    def test_tuple_is_object(self):
        """Tuples are not arrays."""
        assert classify_value((1, 2)) == "object"
