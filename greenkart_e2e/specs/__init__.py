from typing import List, Tuple

from greenkart_e2e.actions import ActionHandler, CartActions


def it(title: str, skip: bool = False):
    """Mark a coroutine method of a Spec as a test titled ``title``."""

    def decorator(func):
        func.test_title = title
        func.test_skip = skip
        return func

    return decorator


class Spec:
    """A group of tests sharing one browser session.

    Subclasses set ``describe`` and declare tests with ``@it``; tests run in
    the order they are written.
    """

    describe = ""

    def __init__(self, actions: ActionHandler, base_url: str):
        self.actions = actions
        self.cart = CartActions(actions)
        self.base_url = base_url

    @classmethod
    def tests(cls) -> List[Tuple[str, str, bool]]:
        """(method name, title, skip) for every declared test."""
        return [
            (name, value.test_title, value.test_skip)
            for name, value in vars(cls).items()
            if callable(value) and hasattr(value, "test_title")
        ]
