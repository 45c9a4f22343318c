"""
Request/response ("callable") functions.

These handlers are pure functions of their input plus the current time:
- say_hello: greeting
- calculate_sum: server-side arithmetic
- get_server_time: server timestamp
- process_image: simulated image filter (no real processing)

Every handler validates its input first and raises InvalidArgumentError
before doing anything else. Once validation has passed, any failure is
logged and surfaced as a generic InternalError.
"""

import logging
import math
import time
from typing import Any, Optional

from functions.models import (
    GreetingResponse,
    ProcessImageResponse,
    ServerTimeResponse,
    SumResponse,
)
from shared.clock import Clock, iso_timestamp, unix_millis, utc_now
from shared.config import Settings, get_settings
from shared.errors import InternalError, InvalidArgumentError
from shared.templates import MessageKey, render_message

logger = logging.getLogger("functions.requests")


def is_number(value: Any) -> bool:
    """True for ints and floats; booleans do not count as numbers."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


class RequestHandlers:
    """
    The stateless callable functions.

    Example:
        handlers = RequestHandlers()
        handlers.say_hello({"name": "Ada"}).message
        # 'Hello, Ada! Welcome to Farm2Home.'
    """

    def __init__(self, clock: Optional[Clock] = None, settings: Optional[Settings] = None):
        self.clock = clock or utc_now
        self.settings = settings or get_settings()

    def say_hello(self, data: dict[str, Any]) -> GreetingResponse:
        """
        Greet a user by name.

        Args:
            data: {"name": non-empty string}
        """
        name = data.get("name")
        if not is_non_empty_string(name):
            raise InvalidArgumentError("Name parameter is required and must be a string")

        logger.info(f"sayHello called with name: {name}")

        try:
            response = GreetingResponse(
                message=render_message(MessageKey.GREETING, name=name, app_name=self.settings.app_name),
                timestamp=iso_timestamp(self.clock()),
            )
        except Exception as e:
            logger.error(f"Error in sayHello: {e}")
            raise InternalError("Failed to process greeting") from e

        logger.info(f"sayHello response: {response.to_result()}")
        return response

    def calculate_sum(self, data: dict[str, Any]) -> SumResponse:
        """
        Add two numbers.

        Args:
            data: {"a": number, "b": number}
        """
        a, b = data.get("a"), data.get("b")
        if not is_number(a) or not is_number(b):
            raise InvalidArgumentError("Both a and b must be numbers")

        logger.info(f"calculateSum called with a: {a}, b: {b}")

        try:
            response = SumResponse(a=a, b=b, sum=a + b, timestamp=iso_timestamp(self.clock()))
        except Exception as e:
            logger.error(f"Error in calculateSum: {e}")
            raise InternalError("Failed to calculate sum") from e

        logger.info(f"calculateSum response: {response.to_result()}")
        return response

    def get_server_time(self, data: Optional[dict[str, Any]] = None) -> ServerTimeResponse:
        """Current server time; both fields come from the same instant."""
        logger.info("getServerTime called")

        try:
            now = self.clock()
            response = ServerTimeResponse(
                timestamp=iso_timestamp(now),
                unix_time=unix_millis(now) // 1000,
            )
        except Exception as e:
            logger.error(f"Error in getServerTime: {e}")
            raise InternalError("Failed to get server time") from e

        logger.info(f"getServerTime response: {response.to_result()}")
        return response

    def process_image(self, data: dict[str, Any]) -> ProcessImageResponse:
        """
        Pretend to apply a filter to an image.

        Blocks for the configured delay to stand in for a slow external call,
        then returns the original URL with filter markers appended.

        Args:
            data: {"imageUrl": non-empty string, "filter": one of the configured filters}
        """
        image_url, filter_name = data.get("imageUrl"), data.get("filter")
        if not is_non_empty_string(image_url) or not is_non_empty_string(filter_name):
            raise InvalidArgumentError("imageUrl and filter are required")

        valid_filters = self.settings.image_filters
        if filter_name not in valid_filters:
            raise InvalidArgumentError(f"Filter must be one of: {', '.join(valid_filters)}")

        logger.info(f"processImage called with filter: {filter_name}")

        start = time.perf_counter()
        try:
            time.sleep(self.settings.image_processing_delay_ms / 1000)
            processing_time = math.ceil((time.perf_counter() - start) * 1000)

            separator = "&" if "?" in image_url else "?"
            response = ProcessImageResponse(
                processed_image_url=f"{image_url}{separator}filter={filter_name}&processed=true",
                filter=filter_name,
                processing_time=processing_time,
                timestamp=iso_timestamp(self.clock()),
            )
        except Exception as e:
            logger.error(f"Error in processImage: {e}")
            raise InternalError("Failed to process image") from e

        logger.info(
            f"processImage response: originalUrl={image_url} filter={filter_name} "
            f"processingTime={processing_time}ms processedUrl={response.processed_image_url}"
        )
        return response
