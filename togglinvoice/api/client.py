"""
TogglClient: A client for the Toggl reports and workspace APIs.
"""
import logging
import requests
from requests.auth import HTTPBasicAuth
from typing import Optional, Dict, Any, List, Tuple

from ..errors import FetchError

log = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50  # Toggl detailed report page size


class TogglClient:
    """A client for the Toggl API."""

    def __init__(self, api_token: str, user_agent: str = "togglinvoice",
                 base_url: str = "https://api.track.toggl.com",
                 session: Optional[requests.Session] = None):
        """Initialize the TogglClient.

        Args:
            api_token: Toggl API token
            user_agent: Identifier sent with report requests (required by the reports API)
            base_url: API host (optional)
            session: requests session to reuse (optional)
        """
        self.api_token = api_token
        self.user_agent = user_agent
        self.base_url = base_url.rstrip("/")
        self.reports_url = f"{self.base_url}/reports/api/v2"
        self.api_url = f"{self.base_url}/api/v9"
        self.session = session or requests.Session()

    def api_get(self, url: str, params: Optional[dict] = None) -> Any:
        """Make an authenticated GET request to the Toggl API.

        Args:
            url: API endpoint URL
            params: Query parameters (optional)

        Returns:
            API response as JSON

        Raises:
            FetchError: If the API request fails or the body is not JSON
        """
        auth = HTTPBasicAuth(self.api_token, "api_token")
        try:
            resp = self.session.get(url, auth=auth, params=params)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            raise FetchError(f"API request failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"API returned invalid JSON: {e}") from e

    def get_detailed_report_page(self, workspace_id: str, since: str, until: str,
                                 page: int) -> Dict[str, Any]:
        """Get one page of the detailed report.

        Args:
            workspace_id: Toggl workspace ID
            since: First day of the range (YYYY-MM-DD)
            until: Last day of the range (YYYY-MM-DD)
            page: 1-based page number

        Returns:
            Report page with ``data`` and pagination metadata

        Raises:
            FetchError: If the request fails or the page has no ``data`` list
        """
        params = {
            "workspace_id": workspace_id,
            "since": since,
            "until": until,
            "page": page,
            "user_agent": self.user_agent,
        }
        log.debug("START REQ %s", params)
        resp = self.api_get(f"{self.reports_url}/details", params)
        log.debug("END REQ %s", params)
        if not isinstance(resp, dict) or not isinstance(resp.get("data"), list):
            raise FetchError(f"Unexpected report page {page}: missing 'data' list")
        return resp

    def get_detailed_report(self, workspace_id: str, since: str, until: str) -> Dict[str, Any]:
        """Get the full detailed report, following pagination.

        Pages are requested one at a time in increasing order until a page
        holds fewer entries than ``per_page``. Metadata is taken from the
        first page; the entries of all pages are concatenated in order.

        Args:
            workspace_id: Toggl workspace ID
            since: First day of the range (YYYY-MM-DD)
            until: Last day of the range (YYYY-MM-DD)

        Returns:
            Aggregated report: first-page metadata, all ``data``, and ``params``

        Raises:
            FetchError: If any page fails; nothing is returned in that case
        """
        params = {"workspace_id": workspace_id, "since": since, "until": until}
        report = None
        page = 1
        while True:
            resp = self.get_detailed_report_page(workspace_id, since, until, page)
            if report is None:
                report = {k: v for k, v in resp.items() if k != "data"}
                report["data"] = []
                report["params"] = params
            data = resp["data"]
            report["data"].extend(data)
            per_page = resp.get("per_page") or DEFAULT_PAGE_SIZE
            if len(data) < per_page:
                break  # Last page
            page += 1
        log.debug("retrieved %d entries in %d pages", len(report["data"]), page)
        return report

    def get_user_and_workspaces(self) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        """Get user information and workspaces.

        Returns:
            Tuple of (user_info, workspaces)
        """
        user = self.api_get(f"{self.api_url}/me")
        workspaces = self.api_get(f"{self.api_url}/workspaces")
        return user, workspaces
