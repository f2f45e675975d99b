"""HTTP client for the driving-license exam API.

One GET per resource kind. Catalog and ticket-list calls fail hard; missing
explanations and images come back as None so the caller can leave a
placeholder instead.
"""
import logging
from typing import Optional
from urllib.parse import urlencode

import requests

from harvester.models.exam import TicketImage
from harvester.models.settings import DEFAULT_BASE_URL


logger = logging.getLogger(__name__)

LANGUAGES_PATH = "/api/v1/ExamLanguages"
CATEGORIES_PATH = "/api/v1/DrivingLicenseExamCategories"
TICKETS_PATH = "/api/v1/DrivingLicenseExams/GetDrivingLicenseTickets"
EXPLANATION_PATH = "/api/v1/DrivingLicenseExams/Description"
IMAGE_PATH = "/api/v1/DrivingLicenseExams/GetTicketImage"


class FetchError(RuntimeError):
    """A required resource could not be fetched or decoded."""


class NotAnImageError(FetchError):
    """Image endpoint answered successfully with something that is not an image."""


class ExamApiClient:
    """Stateless wrapper over a requests session bound to one API origin."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch_languages(self) -> list[dict]:
        return self._get_json_array(LANGUAGES_PATH, what="languages")

    def fetch_categories(self) -> list[dict]:
        return self._get_json_array(CATEGORIES_PATH, what="categories")

    def fetch_tickets(self, category_id: int, language_id: int) -> list[dict]:
        return self._get_json_array(
            TICKETS_PATH,
            params={"CategoryId": category_id, "LanguageId": language_id},
            what="tickets",
        )

    def fetch_explanation(self, exam_ticket_id: int) -> Optional[str]:
        """Return explanation text, or None when the API has none."""
        response = self._get(EXPLANATION_PATH, params={"examTicketId": exam_ticket_id})
        if not response.ok:
            logger.warning(
                f"Explanation {exam_ticket_id} not found (HTTP {response.status_code}). Using placeholder..."
            )
            return None
        # Body has no reliable charset header; bad bytes become U+FFFD
        text = response.content.decode("utf-8", errors="replace")
        return text or None

    def fetch_image(self, image_id: int) -> Optional[TicketImage]:
        """
        Download a ticket image.

        Returns None when the API answers with a non-success status. Raises
        NotAnImageError when the body is not declared as ``image/*``.
        """
        response = self._get(IMAGE_PATH, params={"imageId": image_id})
        if not response.ok:
            logger.warning(
                f"Image {image_id} not found (HTTP {response.status_code}). Using placeholder..."
            )
            return None

        content_type = response.headers.get("Content-Type")
        if not content_type:
            raise NotAnImageError(f"Missing Content-Type in response for image {image_id}")

        media_type = content_type.split(";", 1)[0].strip().lower()
        main_type, _, subtype = media_type.partition("/")
        if main_type != "image" or not subtype:
            raise NotAnImageError(f"Received file is not image: {content_type} (image {image_id})")

        return TicketImage(id=image_id, extension=subtype, content=response.content)

    def _get(self, path: str, params: Optional[dict] = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.info(f"Fetching {url}{'?' + urlencode(params) if params else ''}...")
        try:
            return self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Request to {url} failed: {e}") from e

    def _get_json_array(self, path: str, what: str, params: Optional[dict] = None) -> list:
        """GET a JSON array; any other status or body is a FetchError."""
        response = self._get(path, params=params)
        if not response.ok:
            raise FetchError(f"Failed to fetch {what} (HTTP {response.status_code})")
        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(f"Failed to decode {what} response as JSON: {e}") from e
        if not isinstance(data, list):
            raise FetchError(f"Expected a JSON array of {what}, got {type(data).__name__}")
        return data
