"""Core API of the mini fixture package."""


class Greeter:
    """Greets people by name."""

    def greet(self, name: str) -> str:
        """Return a deterministic greeting."""
        return f"hello, {name}"

    def _render(self, text: str) -> str:
        return text.title()

    def __cache_key(self) -> str:
        return "greeter"


def compute_value(x: int) -> int:
    return x + 1


def _clamp(x: int) -> int:
    return max(x, 0)
