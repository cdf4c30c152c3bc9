"""Gmail mail source: OAuth, message search, message and attachment fetch"""
import os
import logging
import threading
import time
import httplib2
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from ..models import RawEmail, decode_body_data
from ..utils.retry import make_request_with_backoff

logger = logging.getLogger(__name__)

GMAIL_PAGE_SIZE = 500


def load_credentials(scopes, credentials_file, token_file):
    """
    Load cached OAuth credentials, refreshing or running the consent flow as needed

    Args:
        scopes: List of OAuth2 scopes
        credentials_file: Path to the OAuth client credentials.json
        token_file: Path where the user token is cached

    Returns:
        google.oauth2.credentials.Credentials

    Raises:
        FileNotFoundError: when no token exists and credentials.json is missing
    """
    credentials_file = str(credentials_file)
    token_file = str(token_file)
    creds = None

    if os.path.exists(token_file):
        logger.info(f"Loading credentials from {token_file}")
        creds = Credentials.from_authorized_user_file(token_file, scopes)

    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            logger.info("Refreshing expired credentials")
            creds.refresh(Request())
        else:
            if not os.path.exists(credentials_file):
                raise FileNotFoundError(
                    f"Credentials file not found: {credentials_file}\n"
                    "Please download credentials.json from Google Cloud Console"
                )
            logger.info("Starting OAuth2 flow for new credentials")
            flow = InstalledAppFlow.from_client_secrets_file(credentials_file, scopes)
            creds = flow.run_local_server(port=0)

        os.makedirs(os.path.dirname(os.path.abspath(token_file)), exist_ok=True)
        with open(token_file, 'w') as token:
            token.write(creds.to_json())
        logger.info(f"Saved credentials to {token_file}")

    return creds


def build_gmail_service(creds, timeout=30):
    """
    Build a Gmail API client whose requests time out after `timeout` seconds

    A client is not thread-safe; build one per thread.
    """
    http = AuthorizedHttp(creds, http=httplib2.Http(timeout=timeout))
    return build('gmail', 'v1', http=http, cache_discovery=False)


class GmailSource:
    """Read-only access to one Gmail mailbox"""

    def __init__(self, service_factory, max_retries=5):
        """
        Initialize mail source

        Args:
            service_factory: Callable returning a Gmail API service; called
                once per worker thread
            max_retries: Attempts per request on rate-limit/server errors
        """
        self.service_factory = service_factory
        self.max_retries = max_retries
        self._local = threading.local()

    @property
    def service(self):
        service = getattr(self._local, 'service', None)
        if service is None:
            service = self._local.service = self.service_factory()
        return service

    def _execute(self, request_func):
        return make_request_with_backoff(request_func, max_retries=self.max_retries)

    def get_profile_email(self):
        """Email address of the authenticated account"""
        profile = self._execute(
            lambda: self.service.users().getProfile(userId='me').execute()
        )
        return profile['emailAddress']

    def list_candidate_messages(self, query, limit=100):
        """
        Search messages, following pagination until `limit` ids are collected

        Args:
            query: Gmail search query string
            limit: Maximum number of ids to return

        Returns:
            List of message ids, newest first
        """
        logger.info(f"Searching emails with query: {query[:100]}...")
        message_ids = []
        page_token = None

        while len(message_ids) < limit:
            page_size = min(GMAIL_PAGE_SIZE, limit - len(message_ids))

            def fetch_page():
                return self.service.users().messages().list(
                    userId='me',
                    q=query,
                    pageToken=page_token,
                    maxResults=page_size
                ).execute()

            results = self._execute(fetch_page)
            page = results.get('messages', [])
            message_ids.extend(m['id'] for m in page)
            logger.debug(f"Found {len(page)} messages (total: {len(message_ids)})")

            page_token = results.get('nextPageToken')
            if not page_token or not page:
                break

            # Small delay between pages to be nice to the API
            time.sleep(0.1)

        message_ids = message_ids[:limit]
        logger.info(f"Search complete: {len(message_ids)} candidate messages")
        return message_ids

    def get_message(self, message_id):
        """Full message resource for an id"""
        return self._execute(
            lambda: self.service.users().messages().get(
                userId='me', id=message_id, format='full'
            ).execute()
        )

    def get_raw_email(self, message_id):
        return RawEmail.from_gmail(self.get_message(message_id))

    def get_attachment(self, message_id, attachment_id):
        """
        Download an attachment

        Args:
            message_id: Message the attachment belongs to
            attachment_id: Attachment id from the message part body

        Returns:
            Attachment bytes
        """
        attachment = self._execute(
            lambda: self.service.users().messages().attachments().get(
                userId='me', messageId=message_id, id=attachment_id
            ).execute()
        )
        return decode_body_data(attachment.get('data', ''))
