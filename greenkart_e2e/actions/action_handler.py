import functools
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Union

from playwright.async_api import Locator, Page, expect

from greenkart_e2e.data import StepRecord, TestStatus

Target = Union[str, Locator]


def _describe(value) -> str:
    if isinstance(value, (str, int, float)):
        return str(value)
    return repr(value)


def command(name: str):
    """Record the wrapped coroutine as a step of the command log.

    A raising command marks its step failed and re-raises.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            step = self._record(name, " ".join(_describe(a) for a in args))
            try:
                return await func(self, *args, **kwargs)
            except Exception as e:
                step.status = TestStatus.FAILED
                step.error = str(e)
                logging.error(f"Command {name} failed: {e}")
                raise

        return wrapper

    return decorator


class ActionHandler:
    """Commands the spec files drive the page with.

    Every command appends a StepRecord to ``steps``. Targets are either CSS
    selectors, ``@name`` aliases registered with ``alias`` or Locators.
    """

    def __init__(self, page: Optional[Page] = None, timeout: int = 4000):
        self.page = page
        self.timeout = timeout
        self.aliases: Dict[str, Locator] = {}
        self.steps: List[StepRecord] = []

    async def initialize(self, page: Page, timeout: Optional[int] = None):
        self.page = page
        if timeout is not None:
            self.timeout = timeout
        return self

    def reset(self) -> List[StepRecord]:
        """Forget aliases and hand back the steps recorded so far."""
        steps, self.steps = self.steps, []
        self.aliases = {}
        return steps

    def _record(self, command_name: str, message: str = "") -> StepRecord:
        step = StepRecord(id=len(self.steps) + 1, command=command_name, message=message)
        self.steps.append(step)
        logging.debug(f"[{step.id}] {command_name} {message}")
        return step

    def _resolve(self, target: Target) -> Locator:
        if not isinstance(target, str):
            return target
        if target.startswith("@"):
            name = target[1:]
            if name not in self.aliases:
                raise ValueError(f"Alias @{name} was not declared before use")
            return self.aliases[name]
        return self.page.locator(target)

    # Queries

    def get(self, selector: str) -> Locator:
        self._record("get", selector)
        return self._resolve(selector)

    def find(self, parent: Target, selector: str) -> Locator:
        self._record("find", selector)
        return self._resolve(parent).locator(selector)

    def eq(self, target: Target, index: int) -> Locator:
        self._record("eq", str(index))
        return self._resolve(target).nth(index)

    def alias(self, name: str, target: Target) -> Locator:
        """Register a re-queryable Locator under ``@name``."""
        locator = self._resolve(target)
        self.aliases[name] = locator
        self._record("as", f"@{name}")
        return locator

    def contains(self, text: str, selector: Optional[str] = None, within: Optional[Target] = None) -> Locator:
        """First element containing ``text``, optionally restricted to ``selector``."""
        self._record("contains", f"{selector} {text}" if selector else text)
        root = self._resolve(within) if within is not None else self.page
        if selector:
            return root.locator(selector, has_text=text).first
        return root.get_by_text(text).first

    # Actions

    @command("visit")
    async def visit(self, url: str):
        await self.page.goto(url, wait_until="domcontentloaded")

    @command("type")
    async def type_text(self, target: Target, text: str):
        # Key by key so the page's keyup filtering fires
        await self._resolve(target).press_sequentially(text)

    @command("click")
    async def click(self, target: Target):
        await self._resolve(target).click()

    @command("select")
    async def select(self, target: Target, option: str):
        return await self._resolve(target).select_option(option)

    @command("wait")
    async def wait(self, ms: int):
        await self.page.wait_for_timeout(ms)

    @command("log")
    async def log(self, message):
        logging.info(f"[spec log] {message}")

    @command("each")
    async def each(self, target: Target, callback: Callable[[Locator, int, List[Locator]], Awaitable[None]]):
        """Await ``callback(element, index, elements)`` for every match, in order.

        Waits up to the command timeout for at least one match, so an empty
        result fails the step instead of iterating over nothing.
        """
        locator = self._resolve(target)
        await locator.first.wait_for(state="attached", timeout=self.timeout)
        elements = await locator.all()
        for index, element in enumerate(elements):
            await callback(element, index, elements)
        return elements

    @command("text")
    async def text(self, target: Target) -> str:
        return "".join(await self._resolve(target).all_text_contents())

    @command("count")
    async def count(self, target: Target) -> int:
        return await self._resolve(target).count()

    # Assertions, retried until the command timeout

    @command("should have length")
    async def should_have_length(self, target: Target, length: int):
        await expect(self._resolve(target)).to_have_count(length, timeout=self.timeout)

    @command("should have length at least")
    async def should_have_length_at_least(self, target: Target, length: int):
        if length <= 0:
            return
        await expect(self._resolve(target).nth(length - 1)).to_be_attached(timeout=self.timeout)

    @command("should be visible")
    async def should_be_visible(self, target: Target):
        await expect(self._resolve(target)).to_be_visible(timeout=self.timeout)
