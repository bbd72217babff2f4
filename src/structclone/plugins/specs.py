"""Hook specifications for structclone startup events."""

from structclone.serialization.registry import TypeRegistry

from .markers import hook_spec


class TypeSpec:
    """Hook specifications for contributing serializable types."""

    @hook_spec(historic=True)
    def register_types(self, registry: TypeRegistry) -> None:
        """
        Called once per plugin, as soon as the plugin is registered, to register its types.

        Args:
            registry: Registry the plugin's types should be registered in.
        """
