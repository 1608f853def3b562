from abc import ABC, abstractmethod

from .nodes import Stmt


class Instrumenter(ABC):
    """Supplies the statements to inject and the imports they need.

    To add a new instrumenter:
      1. Create ``instrumenters/<name>.py``
      2. Subclass ``Instrumenter``
      3. Decorate with ``@register``
      4. Import it in ``instrumenters/__init__.py``
    """

    name: str

    @abstractmethod
    def imports(self) -> list[str]:
        """Return the import paths the prefix statements depend on."""

    @abstractmethod
    def prefix_statements(self, span_name: str, has_error: bool) -> list[Stmt]:
        """Return fresh statement nodes to prepend to a function body."""


class FunctionSelector(ABC):
    """Decides, by bare function name, whether a function is considered."""

    @abstractmethod
    def accept_function(self, name: str) -> bool:
        ...
