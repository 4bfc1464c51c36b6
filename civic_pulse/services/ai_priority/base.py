"""
AI Priority Provider Base Interface.

Defines the contract for language-model providers used by the AI assessor.
Each provider hides its own wire format behind generate().
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Tuple
import logging
import time

import requests

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Transport-level failure: non-2xx response, network error, timeout or an empty body."""


@dataclass(frozen=True)
class AIUnavailable:
    """
    The AI path produced no usable verdict.

    Returned in place of a PriorityAssessment; the reason is for logs only.
    """
    reason: str


class PriorityProvider(ABC):
    """
    Abstract base class for priority providers.

    generate() makes exactly one request/response exchange:
    no streaming, no retries, bounded by get_timeout_seconds().
    """

    @abstractmethod
    def is_enabled(self) -> bool:
        """
        Check if this provider has a credential configured.
        """
        pass

    @abstractmethod
    def get_model_info(self) -> Dict[str, str]:
        """
        Get model information.

        Returns:
            Dict with 'provider' and 'name' keys
        """
        pass

    @abstractmethod
    def get_timeout_seconds(self) -> float:
        pass

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Send the prompt and return the raw text of the model's reply.

        Raises:
            ProviderError: on any transport failure or unexpected envelope
        """
        pass


def post_with_deadline(
    session,
    url: str,
    timeout_seconds: float,
    clock: Callable[[], float] = time.monotonic,
    **kwargs,
) -> Tuple[int, bytes]:
    """
    POST and read the whole response body within timeout_seconds.

    The requests `timeout` bounds each socket operation; the deadline here
    bounds the exchange as a whole, so a server trickling bytes is cut off.

    Returns:
        (status_code, body)

    Raises:
        ProviderError: on a network error or when the deadline passes
    """
    deadline = clock() + timeout_seconds
    try:
        response = session.post(url, timeout=(timeout_seconds, timeout_seconds), stream=True, **kwargs)
    except requests.RequestException as e:
        raise ProviderError(f"Request to {url} failed: {e}")

    try:
        chunks = []
        for chunk in response.iter_content(chunk_size=8192):
            chunks.append(chunk)
            if clock() > deadline:
                raise ProviderError(f"Response from {url} not complete within {timeout_seconds}s")
        return response.status_code, b"".join(chunks)
    except requests.RequestException as e:
        raise ProviderError(f"Reading response from {url} failed: {e}")
    finally:
        response.close()
