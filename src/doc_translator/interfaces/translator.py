"""Translation capability interface for the document translator."""

from abc import ABC, abstractmethod
from typing import List, Optional


class ITranslationService(ABC):
    """
    Abstract interface for the external translation capability.

    Implementations wrap a remote model or API. Both methods are coroutines;
    the package never performs network I/O itself.
    """

    @abstractmethod
    async def translate_batch(
        self,
        texts: List[str],
        context: Optional[str] = None
    ) -> List[str]:
        """
        Translate a batch of text fragments.

        Args:
            texts: Fragments to translate, in order.
            context: Optional guidance (document summary, terminology,
                do-not-translate terms) to steer the translation.

        Returns:
            Translated fragments, one per input and in the same order.

        Raises:
            TranslationError: On transport, quota or provider failures.
        """
        pass

    @abstractmethod
    async def summarize(self, text: str) -> str:
        """
        Produce a short summary of a whole document.

        Args:
            text: Full source document.

        Returns:
            Summary used as translation context.

        Raises:
            TranslationError: On transport, quota or provider failures.
        """
        pass
