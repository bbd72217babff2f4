"""Unit tests for TypeRegistry."""

import threading
from datetime import datetime

import pytest

from structclone.exceptions import DuplicateRegistrationError
from structclone.exceptions import UnknownTypeError
from structclone.fields import Record
from structclone.serialization import TypeRegistry
from structclone.serialization import default_registry
from structclone.serialization import lookup
from structclone.serialization import register
from structclone.serialization import serializable


class Widget:
    pass


class Gadget:
    pass


class TestTypeRegistry:
    """Tests for TypeRegistry."""

    def test_builtins_registered(self, registry):
        """Plain records and the primitive-wrapping kinds are pre-registered."""
        assert registry.lookup("Object") is dict
        assert registry.lookup("int") is int
        assert registry.lookup("float") is float
        assert registry.lookup("str") is str
        assert registry.lookup("datetime") is datetime
        assert registry.lookup("bool") is bool
        assert registry.lookup("Record") is Record

    def test_without_builtins(self):
        """builtins=False starts empty."""
        registry = TypeRegistry(builtins=False)
        assert len(registry) == 0
        with pytest.raises(UnknownTypeError):
            registry.lookup("Object")

    def test_register_and_lookup(self, registry):
        """Registered classes are returned by lookup()."""
        registry.register("Widget", Widget)
        assert registry.lookup("Widget") is Widget
        assert "Widget" in registry

    def test_duplicate_registration(self, registry):
        """Registering a name twice fails and keeps the first registration."""
        registry.register("Widget", Widget)
        with pytest.raises(DuplicateRegistrationError, match="'Widget'"):
            registry.register("Widget", Gadget)
        assert registry.lookup("Widget") is Widget

    def test_builtin_names_cannot_be_replaced(self, registry):
        """Built-in names count as registered."""
        with pytest.raises(DuplicateRegistrationError):
            registry.register("Object", Widget)

    def test_unknown_type(self, registry):
        """lookup() of an unregistered name raises UnknownTypeError."""
        with pytest.raises(UnknownTypeError, match="'Nope'"):
            registry.lookup("Nope")

    @pytest.mark.parametrize("name", ["", None, 3])
    def test_invalid_names(self, registry, name):
        """Names must be non-empty strings."""
        with pytest.raises(ValueError, match="non-empty"):
            registry.register(name, Widget)

    def test_reserved_name(self, registry):
        """The undefined tag cannot be registered."""
        with pytest.raises(ValueError, match="reserved"):
            registry.register("__undefined__", Widget)

    def test_constructor_must_be_class(self, registry):
        """Only classes can be registered."""
        with pytest.raises(TypeError, match="Only classes"):
            registry.register("widget", Widget())

    def test_name_of(self, registry):
        """name_of() prefers the registered name and falls back to __name__."""
        registry.register("widget.v1", Widget)
        assert registry.name_of(Widget) == "widget.v1"
        assert registry.name_of(Gadget) == "Gadget"
        assert registry.name_of(dict) == "Object"

    def test_name_of_first_registration_wins(self, registry):
        """A class registered under two names is written with the first one."""
        registry.register("first", Widget)
        registry.register("second", Widget)
        assert registry.name_of(Widget) == "first"
        assert registry.lookup("second") is Widget

    def test_names_in_registration_order(self):
        """names() and iteration follow registration order."""
        registry = TypeRegistry(builtins=False)
        registry.register("b", Widget)
        registry.register("a", Gadget)
        assert registry.names() == ["b", "a"]
        assert list(registry) == ["b", "a"]

    def test_serializable_decorator(self, registry):
        """The decorator registers under the class name and returns the class."""

        @registry.serializable
        class Sprocket:
            pass

        assert registry.lookup("Sprocket") is Sprocket

    def test_serializable_decorator_with_name(self, registry):
        """The decorator accepts an explicit name."""

        @registry.serializable(name="custom.Sprocket")
        class Sprocket:
            pass

        assert registry.lookup("custom.Sprocket") is Sprocket
        assert "Sprocket" not in registry

    def test_concurrent_duplicate_registration(self, registry):
        """When many threads register the same name, exactly one wins."""
        errors = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            try:
                registry.register("Contended", Widget)
            except DuplicateRegistrationError as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(errors) == 7
        assert registry.lookup("Contended") is Widget


class TestDefaultRegistry:
    """Tests for the process-wide registry and its module-level shortcuts."""

    def test_register_and_lookup(self):
        """register()/lookup() go through default_registry."""

        class RegistryShortcutProbe:
            pass

        register("tests.RegistryShortcutProbe", RegistryShortcutProbe)
        assert lookup("tests.RegistryShortcutProbe") is RegistryShortcutProbe
        assert "tests.RegistryShortcutProbe" in default_registry

    def test_serializable(self):
        """The module-level decorator registers in default_registry."""

        @serializable(name="tests.DecoratorProbe")
        class DecoratorProbe:
            pass

        assert default_registry.lookup("tests.DecoratorProbe") is DecoratorProbe
