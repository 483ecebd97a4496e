from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

logger = logging.getLogger(__name__)

# Readonly covers messages, threads and drafts reads.
SCOPES = ["https://www.googleapis.com/auth/gmail.readonly"]

# Refresh the access token this long before it actually expires.
TOKEN_REFRESH_SKEW = timedelta(minutes=5)


@dataclass(frozen=True)
class GmailClientConfig:
    # Path to OAuth client credentials downloaded from Google Cloud Console.
    credentials_path: Path
    # Token cache will be created here after first login.
    token_path: Path
    # Gmail userId, "me" refers to the authenticated user.
    user_id: str = "me"


def needs_refresh(creds: Credentials, now: Optional[datetime] = None) -> bool:
    """True if the token is missing, expired, or expires within TOKEN_REFRESH_SKEW."""
    if not creds.token:
        return True
    if creds.expiry is None:
        return False
    # google-auth keeps expiry as a naive UTC datetime.
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    return creds.expiry - now <= TOKEN_REFRESH_SKEW


class GmailClient:
    def __init__(self, cfg: GmailClientConfig):
        self._cfg = cfg
        self._creds: Optional[Credentials] = None
        self._service = None

    def connect(self) -> None:
        """Create an authenticated Gmail API service client."""
        creds = None

        if self._cfg.token_path.exists():
            creds = Credentials.from_authorized_user_file(str(self._cfg.token_path), SCOPES)

        if creds and creds.refresh_token and needs_refresh(creds):
            logger.info("Refreshing Gmail access token")
            creds.refresh(Request())
            self._save_token(creds)
        elif not creds or not creds.valid:
            # No usable cache, let the user log in.
            logger.info("Starting interactive Gmail login")
            flow = InstalledAppFlow.from_client_secrets_file(
                str(self._cfg.credentials_path),
                SCOPES,
            )
            creds = flow.run_local_server(port=0)
            self._save_token(creds)

        self._creds = creds
        self._service = build("gmail", "v1", credentials=creds, cache_discovery=False)

    def _save_token(self, creds: Credentials) -> None:
        self._cfg.token_path.parent.mkdir(parents=True, exist_ok=True)
        self._cfg.token_path.write_text(creds.to_json(), encoding="utf-8")

    @property
    def service(self):
        if self._service is None:
            raise RuntimeError("GmailClient is not connected. Call connect() first.")
        return self._service

    def list_messages(
        self,
        query: str = "",
        max_results: int = 20,
        label_ids: Optional[List[str]] = None,
    ) -> List[str]:
        """
        List message IDs matching a Gmail search query.
        Example query: 'category:primary is:unread'
        """
        params: Dict[str, Any] = {"userId": self._cfg.user_id, "maxResults": max_results}
        if query:
            params["q"] = query
        if label_ids:
            params["labelIds"] = label_ids
        resp = self.service.users().messages().list(**params).execute()
        return [m["id"] for m in resp.get("messages", [])]

    def get_message(self, message_id: str, fmt: str = "full") -> Dict[str, Any]:
        """
        Fetch a full message resource.
        fmt: 'full' | 'metadata' | 'minimal' | 'raw'
        """
        return (
            self.service.users()
            .messages()
            .get(userId=self._cfg.user_id, id=message_id, format=fmt)
            .execute()
        )

    def list_threads(self, query: str = "", max_results: int = 20) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"userId": self._cfg.user_id, "maxResults": max_results}
        if query:
            params["q"] = query
        resp = self.service.users().threads().list(**params).execute()
        return resp.get("threads", [])

    def get_thread(self, thread_id: str) -> Dict[str, Any]:
        """Fetch a thread with every message in full format."""
        return (
            self.service.users()
            .threads()
            .get(userId=self._cfg.user_id, id=thread_id, format="full")
            .execute()
        )

    def list_drafts(self, max_results: int = 10) -> List[Dict[str, Any]]:
        resp = (
            self.service.users()
            .drafts()
            .list(userId=self._cfg.user_id, maxResults=max_results)
            .execute()
        )
        return resp.get("drafts", [])

    def get_draft(self, draft_id: str) -> Dict[str, Any]:
        return (
            self.service.users()
            .drafts()
            .get(userId=self._cfg.user_id, id=draft_id, format="full")
            .execute()
        )

    def get_profile(self) -> Dict[str, Any]:
        """Get the Gmail profile of the authenticated user."""
        return self.service.users().getProfile(userId=self._cfg.user_id).execute()
