"""OpenCV template matching for the visual healing strategy."""

from __future__ import annotations

import io
import logging
from typing import Any

import cv2
import numpy as np
from PIL import Image

from selfheal.core.metadata import VisualMatch

logger = logging.getLogger(__name__)


class OpenCVTemplateMatcher:
    """Finds a captured element image inside a page screenshot.

    Uses normalized cross-correlation, so the confidence is on a 0-1 scale
    and can be compared directly with the healing threshold.
    """

    def __init__(self, grayscale: bool = True, method: int = cv2.TM_CCOEFF_NORMED) -> None:
        self.grayscale = grayscale
        self.method = method

    def locate(self, template: bytes, screenshot: bytes) -> VisualMatch | None:
        needle = self._decode(template)
        haystack = self._decode(screenshot)
        height, width = needle.shape[:2]
        if height > haystack.shape[0] or width > haystack.shape[1]:
            logger.debug("Template %sx%s is larger than the screenshot", width, height)
            return None

        result = cv2.matchTemplate(haystack, needle, self.method)
        _, max_val, _, max_loc = cv2.minMaxLoc(result)
        if not np.isfinite(max_val):
            return None
        x, y = max_loc
        return VisualMatch(
            x=float(x),
            y=float(y),
            width=float(width),
            height=float(height),
            confidence=float(max_val),
        )

    def _decode(self, data: bytes) -> np.ndarray[Any, Any]:
        image = Image.open(io.BytesIO(data)).convert("RGB")
        array = cv2.cvtColor(np.array(image), cv2.COLOR_RGB2BGR)
        if self.grayscale:
            return cv2.cvtColor(array, cv2.COLOR_BGR2GRAY)
        return array
