"""Adapters implementing the translation capability interface."""

from typing import Awaitable, Callable, List, Optional

from ..exceptions import TranslationServiceError
from ..interfaces.translator import ITranslationService

TranslateFunction = Callable[[List[str], Optional[str]], Awaitable[List[str]]]
SummarizeFunction = Callable[[str], Awaitable[str]]


class FunctionTranslationService(ITranslationService):
    """
    ITranslationService built from plain coroutine functions.

    Useful for callers that already have a translate function (and
    optionally a summarize function) and do not want to subclass.
    """

    def __init__(
        self,
        translate: TranslateFunction,
        summarize: Optional[SummarizeFunction] = None
    ):
        """
        Initialize the adapter.

        Args:
            translate: ``async (texts, context) -> list[str]``.
            summarize: ``async (text) -> str``; summaries are unavailable
                when omitted.
        """
        self._translate = translate
        self._summarize = summarize

    async def translate_batch(
        self,
        texts: List[str],
        context: Optional[str] = None
    ) -> List[str]:
        return list(await self._translate(list(texts), context))

    async def summarize(self, text: str) -> str:
        if self._summarize is None:
            raise TranslationServiceError(
                "No summarize function configured", retryable=False
            )
        return await self._summarize(text)
