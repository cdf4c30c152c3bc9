"""Tests for the Gmail mail source against a mocked API client"""
import base64
import threading
from unittest.mock import Mock, patch

import httplib2
import pytest
from googleapiclient.errors import HttpError

from flight_scanner.search.gmail_source import GmailSource


def http_error(status):
    return HttpError(httplib2.Response({'status': status}), b'{}')


class TestGmailSource:
    """Test GmailSource"""

    def setup_method(self):
        self.service = Mock()
        self.source = GmailSource(lambda: self.service, max_retries=3)
        self.list_call = self.service.users.return_value.messages.return_value.list

    def test_pagination_stops_at_limit(self):
        self.list_call.return_value.execute.side_effect = [
            {'messages': [{'id': 'a'}, {'id': 'b'}], 'nextPageToken': 't1'},
            {'messages': [{'id': 'c'}, {'id': 'd'}], 'nextPageToken': 't2'},
        ]

        with patch('flight_scanner.search.gmail_source.time.sleep'):
            ids = self.source.list_candidate_messages('flight', limit=3)

        assert ids == ['a', 'b', 'c']
        first, second = self.list_call.call_args_list
        assert first.kwargs['maxResults'] == 3
        assert first.kwargs['pageToken'] is None
        assert second.kwargs['maxResults'] == 1
        assert second.kwargs['pageToken'] == 't1'

    def test_pagination_stops_without_token(self):
        self.list_call.return_value.execute.return_value = {'messages': [{'id': 'a'}]}

        assert self.source.list_candidate_messages('flight', limit=100) == ['a']
        assert self.list_call.call_count == 1

    def test_empty_search(self):
        self.list_call.return_value.execute.return_value = {}

        assert self.source.list_candidate_messages('flight') == []

    def test_get_attachment_decodes_data(self):
        data = base64.urlsafe_b64encode(b'%PDF-1.4 ticket').decode('ascii').rstrip('=')
        attachments = self.service.users.return_value.messages.return_value.attachments
        attachments.return_value.get.return_value.execute.return_value = {'data': data, 'size': 15}

        assert self.source.get_attachment('msg1', 'att1') == b'%PDF-1.4 ticket'
        attachments.return_value.get.assert_called_with(userId='me', messageId='msg1', id='att1')

    def test_get_raw_email(self):
        get_call = self.service.users.return_value.messages.return_value.get
        get_call.return_value.execute.return_value = {
            'id': 'msg1',
            'payload': {'headers': [{'name': 'Subject', 'value': 'Your itinerary'}]},
        }

        email = self.source.get_raw_email('msg1')

        assert email.subject == 'Your itinerary'
        get_call.assert_called_with(userId='me', id='msg1', format='full')

    def test_rate_limit_retried(self):
        profile = self.service.users.return_value.getProfile.return_value
        profile.execute.side_effect = [http_error(429), {'emailAddress': 'me@example.com'}]

        with patch('flight_scanner.utils.retry.time.sleep'):
            assert self.source.get_profile_email() == 'me@example.com'

    def test_client_error_not_retried(self):
        profile = self.service.users.return_value.getProfile.return_value
        profile.execute.side_effect = http_error(404)

        with pytest.raises(HttpError):
            self.source.get_profile_email()
        assert profile.execute.call_count == 1

    def test_one_service_per_thread(self):
        factory = Mock(side_effect=lambda: object())
        source = GmailSource(factory)
        seen = []

        def worker():
            seen.append((source.service, source.service))

        threads = [threading.Thread(target=worker) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert factory.call_count == 2
        (a1, a2), (b1, b2) = seen
        assert a1 is a2
        assert b1 is b2
        assert a1 is not b1
